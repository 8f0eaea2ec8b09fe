"""Parse ``allinfo`` output into FileMetadata."""

import re
from typing import Dict, Optional

from smbbridge.model.share import FileMetadata, attribute_flags

_DIGITS = re.compile(r"^\d+$")
_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_ATTR_MASK = re.compile(r"\s*\(\s*[0-9a-fA-F]+\s*\)\s*$")
_DATA_STREAM = re.compile(r"\[::\$DATA\],\s*(\d+)\s+bytes", re.IGNORECASE)


def _split_line(line: str):
    if "|" in line:
        parts = line.split("|")
        if len(parts) != 2:
            return None
        key, value = parts
    else:
        # native allinfo layout: "create_time:    Mon Jan  1 10:00:00 2024 UTC"
        key, sep, value = line.partition(":")
        if not sep or not _KEY.match(key.strip()):
            return None

    key = key.strip()
    if not key:
        return None
    return key.upper(), value.strip()


def parse_key_values(text: str) -> Dict[str, str]:
    """Build an uppercased key -> value map; unusable lines are skipped."""
    info: Dict[str, str] = {}
    for line in (text or "").splitlines():
        pair = _split_line(line)
        if pair is None:
            continue
        key, value = pair
        # allinfo may print several streams; the first one wins
        info.setdefault(key, value)
    return info


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    value = value.strip()
    return int(value) if _DIGITS.match(value) else None


def _data_stream_size(text: str) -> Optional[int]:
    match = _DATA_STREAM.search(text or "")
    return int(match.group(1)) if match else None


def parse_metadata(text: str) -> FileMetadata:
    info = parse_key_values(text)

    size = _to_int(info.get("SIZE"))
    if size is None and "SIZE" not in info:
        size = _data_stream_size(text)

    attributes = _ATTR_MASK.sub("", info.get("ATTRIBUTES", ""))

    return FileMetadata(
        size=size,
        create_time=info.get("CREATE_TIME") or None,
        access_time=info.get("ACCESS_TIME") or None,
        write_time=info.get("WRITE_TIME") or None,
        change_time=info.get("CHANGE_TIME") or None,
        attributes=attribute_flags(attributes),
    )
