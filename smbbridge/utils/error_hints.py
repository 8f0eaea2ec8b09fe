"""
Translate smbclient diagnostics into human-readable hints.
"""

import re
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from impacket import nt_errors

SMB_ERROR_HINTS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"EACCES|NT_STATUS_ACCESS_DENIED", re.I),
     "Access Denied - Check your permissions for this file/folder"),
    (re.compile(r"ENOENT|NT_STATUS_OBJECT_(NAME|PATH)_NOT_FOUND|NT_STATUS_NO_SUCH_FILE", re.I),
     "File/Path Not Found"),
    (re.compile(r"ENOTDIR|NT_STATUS_NOT_A_DIRECTORY", re.I),
     "Not a directory"),
    (re.compile(r"ETIMEOUT|ETIMEDOUT|NT_STATUS_IO_TIMEOUT|timed out", re.I),
     "Connection timed out"),
    (re.compile(r"ECONNREFUSED|NT_STATUS_CONNECTION_REFUSED", re.I),
     "Could not connect to SMB server - Connection refused"),
    (re.compile(r"logon[ _]failure", re.I),
     "Logon Failure - Check your username, password, and domain"),
    (re.compile(r"bad[ _]network[ _]name", re.I),
     "Bad Network Name - The specified share does not exist on the server"),
]

_NT_STATUS = re.compile(r"NT_(STATUS_[A-Z0-9_]+)")


@lru_cache(maxsize=1)
def _nt_status_descriptions() -> Dict[str, str]:
    return {name: desc for name, desc in nt_errors.ERROR_MESSAGES.values()}


def describe_nt_status(text: str) -> Optional[str]:
    """Look up the first ``NT_STATUS_*`` code in ``text``."""
    match = _NT_STATUS.search(text or "")
    if not match:
        return None
    return _nt_status_descriptions().get(match.group(1))


def find_hint(text: str) -> Optional[str]:
    if not text:
        return None
    for pattern, friendly in SMB_ERROR_HINTS:
        if pattern.search(text):
            return friendly
    return describe_nt_status(text)


def readable_error(message: str) -> str:
    hint = find_hint(message)
    if hint:
        return f"{hint} ({message})"
    return message
