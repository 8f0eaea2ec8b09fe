from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


def attribute_flags(value: Optional[str]) -> Tuple[str, ...]:
    """Split an attribute string into ordered, de-duplicated flags."""
    if not value:
        return ()
    return tuple(dict.fromkeys(c for c in value if not c.isspace()))


class Operation(str, Enum):
    STAT = "stat"
    LIST = "list"
    GET = "get"
    PUT = "put"
    MKDIR = "mkdir"
    RMDIR = "rmdir"
    DELETE = "del"


@dataclass(frozen=True)
class Credentials:
    host: str
    share: str
    username: str = ""
    password: str = ""
    domain: Optional[str] = None
    port: Optional[int] = None
    max_protocol: Optional[str] = None

    def secrets(self) -> Tuple[str, ...]:
        return tuple(s for s in (self.username, self.password) if s)

    @property
    def is_anonymous(self) -> bool:
        return not self.username

    def __repr__(self):
        return (
            f"Credentials(host={self.host!r}, share={self.share!r}, "
            f"domain={self.domain!r}, username={self.username!r}, password='***')"
        )


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    size: int = 0
    date: Optional[str] = None
    time: Optional[str] = None
    attributes: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_directory(self) -> bool:
        return "D" in self.attributes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "date": self.date,
            "time": self.time,
            "attributes": list(self.attributes),
            "isDirectory": self.is_directory,
        }


@dataclass(frozen=True)
class FileMetadata:
    size: Optional[int] = None
    create_time: Optional[str] = None
    access_time: Optional[str] = None
    write_time: Optional[str] = None
    change_time: Optional[str] = None
    attributes: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_directory(self) -> bool:
        return "D" in self.attributes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "createTime": self.create_time,
            "accessTime": self.access_time,
            "writeTime": self.write_time,
            "changeTime": self.change_time,
            "attributes": list(self.attributes),
            "isDirectory": self.is_directory,
        }


def entries_to_dicts(entries: Iterable[DirectoryEntry]):
    return [e.to_dict() for e in entries]
