# smbbridge/engine/context.py

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from smbbridge.model.share import Credentials


@dataclass
class BinaryData:
    data: bytes
    file_name: str = ""
    mime_type: str = "application/octet-stream"


@dataclass
class Item:
    json: Dict[str, Any] = field(default_factory=dict)
    binary: Dict[str, BinaryData] = field(default_factory=dict)


class ExecutionContext(ABC):
    """What the host framework supplies to a batch run."""

    @abstractmethod
    def get_parameter(self, name: str, index: int, default: Any = None) -> Any:
        ...

    @abstractmethod
    def get_input_data(self) -> List[Item]:
        ...

    @abstractmethod
    def get_credentials(self) -> Credentials:
        ...

    @abstractmethod
    def get_binary_data_buffer(self, index: int, prop: str) -> bytes:
        ...

    @abstractmethod
    def prepare_binary_data(self, data: bytes, file_name: str, mime_type: str) -> BinaryData:
        ...


class LocalContext(ExecutionContext):
    """In-process host: global parameters plus optional per-item overrides."""

    def __init__(
            self,
            credentials: Credentials,
            parameters: Optional[Mapping[str, Any]] = None,
            items: Optional[Sequence[Item]] = None,
            item_parameters: Optional[Sequence[Mapping[str, Any]]] = None,
    ):
        self.credentials = credentials
        self.parameters = dict(parameters or {})
        self.items = list(items) if items else [Item()]
        self.item_parameters = [dict(p) for p in (item_parameters or [])]

    def get_parameter(self, name: str, index: int, default: Any = None) -> Any:
        if index < len(self.item_parameters) and name in self.item_parameters[index]:
            return self.item_parameters[index][name]
        return self.parameters.get(name, default)

    def get_input_data(self) -> List[Item]:
        return self.items

    def get_credentials(self) -> Credentials:
        return self.credentials

    def get_binary_data_buffer(self, index: int, prop: str) -> bytes:
        return self.items[index].binary[prop].data

    def prepare_binary_data(self, data: bytes, file_name: str, mime_type: str) -> BinaryData:
        return BinaryData(data=data, file_name=file_name, mime_type=mime_type)
