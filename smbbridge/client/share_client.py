"""
Share client: one smbclient invocation per operation
"""

import logging
from typing import List, Optional

from smbbridge.errors import SmbBridgeError, SmbConnectionError
from smbbridge.model.share import Credentials, DirectoryEntry, FileMetadata
from smbbridge.parsing.listing import parse_listing
from smbbridge.parsing.metadata import parse_metadata
from smbbridge.transport.runner import (
    DEFAULT_MAX_OUTPUT_BYTES,
    CommandRunner,
    SmbclientRunner,
)
from smbbridge.utils.error_hints import readable_error
from smbbridge.utils.path_utils import listing_mask, quote_remote, unc_address

logger = logging.getLogger("smbbridge")


class ShareClient:
    """Stateless wrapper around the smbclient CLI for a single share.

    There is no session underneath; every call spawns a fresh process, so an
    instance can be reused for any number of items.
    """

    def __init__(
            self,
            credentials: Credentials,
            smbclient_path: str = "smbclient",
            runner: Optional[CommandRunner] = None,
            max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    ):
        self.credentials = credentials
        self.runner = runner or SmbclientRunner(
            smbclient_path=smbclient_path,
            secrets=credentials.secrets(),
            max_output_bytes=max_output_bytes,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _user_spec(self) -> str:
        creds = self.credentials
        if creds.is_anonymous:
            return "%"
        if creds.domain:
            return f"{creds.domain}/{creds.username}%{creds.password or ''}"
        return f"{creds.username}%{creds.password or ''}"

    def connection_args(self) -> List[str]:
        creds = self.credentials
        args = [unc_address(creds.host, creds.share), "-U", self._user_spec(), "-g"]
        if creds.port:
            args.extend(["-p", str(creds.port)])
        if creds.max_protocol:
            args.extend(["-m", creds.max_protocol])
        return args

    def _run(self, command: str) -> str:
        return self.runner.run(self.connection_args(), command)

    # ------------------------------------------------------------ queries

    def stat(self, path: str) -> FileMetadata:
        return parse_metadata(self._run(f"allinfo {quote_remote(path)}"))

    def list(self, directory: str) -> List[DirectoryEntry]:
        out = self._run(f"ls {quote_remote(listing_mask(directory))}")
        return parse_listing(out)

    # ---------------------------------------------------------- transfers

    def get(self, remote_path: str, local_path: str) -> None:
        self._run(f"get {quote_remote(remote_path)} {quote_remote(local_path)}")

    def put(self, local_path: str, remote_path: str) -> None:
        self._run(f"put {quote_remote(local_path)} {quote_remote(remote_path)}")

    # --------------------------------------------------------- structure

    def mkdir(self, directory: str) -> None:
        self._run(f"mkdir {quote_remote(directory)}")

    def rmdir(self, directory: str) -> None:
        self._run(f"rmdir {quote_remote(directory)}")

    def delete(self, path: str) -> None:
        self._run(f"del {quote_remote(path)}")

    def close(self) -> None:
        # No persistent connection behind the CLI; kept for API parity.
        pass


def connect_to_share(
        credentials: Credentials,
        smbclient_path: str = "smbclient",
        verify: bool = True,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> ShareClient:
    """Build a client and optionally prove the share is reachable."""
    logger.debug(
        f"Connecting to //{credentials.host}/{credentials.share} "
        f"(domain={credentials.domain or '-'}, anonymous={credentials.is_anonymous})"
    )

    client = ShareClient(
        credentials,
        smbclient_path=smbclient_path,
        max_output_bytes=max_output_bytes,
    )
    if not verify:
        return client

    try:
        client.list("")
    except SmbBridgeError as e:
        logger.debug(f"Connect error: {e}")
        # runner failures already carry their hint
        reason = str(e) if getattr(e, "hint", None) else readable_error(str(e))
        raise SmbConnectionError(
            f"Failed to connect to SMB server: {reason}",
            command=getattr(e, "command", ""),
            diagnostic=getattr(e, "diagnostic", ""),
            returncode=getattr(e, "returncode", None),
            hint=getattr(e, "hint", None),
        ) from e

    return client
