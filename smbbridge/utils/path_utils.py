#!/usr/bin/env python3
import os
import tempfile
import time
import uuid
from typing import Optional, Tuple

from smbbridge.errors import InvalidPathError

_UNQUOTABLE = ('"', ";", "\n", "\r")


def parse_unc_base(unc_path: str) -> Optional[Tuple[str, str, str]]:
    """Parse UNC path into base components.

    Args:
        unc_path: UNC path like //server/share/path or \\\\server\\share

    Returns:
        Tuple of (server, share, path) where path uses forward slashes
        and defaults to "/" for share root. Returns None if invalid.
    """
    normalized = unc_path.replace("\\", "/")
    parts = [p for p in normalized.split("/") if p]

    if len(parts) < 2:
        return None

    server = parts[0]
    share = parts[1]
    path = "/" + "/".join(parts[2:]) if len(parts) > 2 else "/"

    return server, share, path


def unc_address(host: str, share: str) -> str:
    """Share address in the backslash form smbclient expects."""
    return f"\\\\{host}\\{share}"


def remote_basename(remote_path: str) -> str:
    normalized = remote_path.replace("\\", "/").rstrip("/")
    return normalized.rsplit("/", 1)[-1]


def listing_mask(directory: str) -> str:
    """smbclient lists a directory's contents only when the mask ends in a separator."""
    if not directory:
        return "/"
    if directory.endswith(("/", "\\", "*")):
        return directory
    return directory + "/"


def quote_remote(path: str) -> str:
    if any(c in path for c in _UNQUOTABLE):
        raise InvalidPathError(f"Path cannot be quoted for smbclient: {path!r}")
    return f'"{path}"'


def make_temp_path(prefix: str) -> str:
    stamp = int(time.time() * 1000)
    return os.path.join(
        tempfile.gettempdir(), f"smbbridge-{prefix}-{stamp}-{uuid.uuid4()}"
    )


def discard_temp(path: str) -> None:
    try:
        os.unlink(path)
    except OSError:
        pass
