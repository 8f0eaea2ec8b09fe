"""
Configuration for smbclient-bridge

Defaults live in the section dataclasses; a TOML file is merged on top and
CLI flags are applied last by the caller.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from smbbridge.errors import ConfigurationError
from smbbridge.model.share import Credentials
from smbbridge.transport.runner import DEFAULT_MAX_OUTPUT_BYTES

LOG_LEVELS = ("debug", "info", "warning")
LOG_TYPES = ("plain", "json", "all")


@dataclass
class AuthConfig:
    host: Optional[str] = None
    share: Optional[str] = None
    domain: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    port: Optional[int] = None
    max_protocol: Optional[str] = None

    def to_credentials(self) -> Credentials:
        if not self.host or not self.share:
            raise ConfigurationError("Both host and share are required")
        return Credentials(
            host=self.host,
            share=self.share,
            username=self.username or "",
            password=self.password or "",
            domain=self.domain or None,
            port=self.port,
            max_protocol=self.max_protocol,
        )


@dataclass
class ClientConfig:
    smbclient_path: str = "smbclient"
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES


@dataclass
class LoggingConfig:
    log_level: str = "info"
    log_file: Optional[str] = None
    log_type: str = "plain"


@dataclass
class BridgeConfiguration:
    auth: AuthConfig = field(default_factory=AuthConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    params: Dict[str, Any] = field(default_factory=dict)

    _SECTIONS = ("auth", "client", "logging")

    @classmethod
    def load(cls, path) -> "BridgeConfiguration":
        cfg = cls()
        cfg.merge_file(path)
        return cfg

    def merge_file(self, path) -> None:
        path = Path(path)
        try:
            data = toml.load(path)
        except FileNotFoundError:
            raise ConfigurationError(f"Config file not found: {path}") from None
        except toml.TomlDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e
        self.merge_dict(data)

    def merge_dict(self, data: Dict[str, Any]) -> None:
        for section_name, values in data.items():
            if section_name == "params":
                if not isinstance(values, dict):
                    raise ConfigurationError("[params] must be a table")
                self.params.update(values)
                continue

            if section_name not in self._SECTIONS or not isinstance(values, dict):
                raise ConfigurationError(f"Unknown config section: [{section_name}]")

            section = getattr(self, section_name)
            known = {f.name for f in fields(section)}
            for key, value in values.items():
                if key not in known:
                    raise ConfigurationError(
                        f"Unknown config key: {section_name}.{key}"
                    )
                setattr(section, key, value)

    def validate(self) -> None:
        try:
            max_output = int(self.client.max_output_bytes)
        except (TypeError, ValueError):
            max_output = 0
        if max_output <= 0:
            raise ConfigurationError(
                f"client.max_output_bytes must be a positive integer: "
                f"{self.client.max_output_bytes}"
            )
        self.client.max_output_bytes = max_output
        if not self.client.smbclient_path:
            raise ConfigurationError("client.smbclient_path must not be empty")
        if self.logging.log_level.lower() not in LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.logging.log_level} "
                f"(choose from {', '.join(LOG_LEVELS)})"
            )
        if self.logging.log_type not in LOG_TYPES:
            raise ConfigurationError(
                f"Invalid log type: {self.logging.log_type} "
                f"(choose from {', '.join(LOG_TYPES)})"
            )
        if self.auth.port is not None:
            try:
                port = int(self.auth.port)
            except (TypeError, ValueError):
                port = 0
            if not 0 < port < 65536:
                raise ConfigurationError(f"Invalid port: {self.auth.port}")
            self.auth.port = port
