"""
Run the smbclient binary and turn its exit status and stderr into failures.
"""

import logging
import os
import re
import shutil
import subprocess
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from smbbridge.errors import OutputLimitExceededError, SmbCommandError
from smbbridge.utils.error_hints import find_hint
from smbbridge.utils.redact import redact

logger = logging.getLogger("smbbridge")

DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024
_CHUNK_SIZE = 64 * 1024

# smbclient prints harmless warnings on stderr; only these count as errors
_STDERR_ERROR = re.compile(r"NT_STATUS|Error|failed", re.IGNORECASE)


class CommandRunner(ABC):
    @abstractmethod
    def run(self, connection_args: List[str], command: str) -> str:
        """Execute one smbclient command and return its stdout.

        Raises:
            SmbCommandError: if the command failed
        """
        ...


class SmbclientRunner(CommandRunner):
    """Runs ``smbclient <connection args> -c <command>`` once per call."""

    def __init__(
            self,
            smbclient_path: str = "smbclient",
            secrets: Iterable[str] = (),
            max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    ):
        self.smbclient_path = smbclient_path or "smbclient"
        self.secrets = tuple(s for s in secrets if s)
        self.max_output_bytes = max_output_bytes

    def is_available(self) -> bool:
        return shutil.which(self.smbclient_path) is not None

    def run(self, connection_args: List[str], command: str) -> str:
        argv = [self.smbclient_path, *connection_args, "-c", command]
        safe_cmd = redact(" ".join(argv), self.secrets)

        logger.debug(f"Executing: {safe_cmd}")

        start_time = datetime.now()
        exit_code: Optional[int] = None
        stdout_len = 0
        stderr_len = 0

        try:
            with tempfile.TemporaryFile() as err_f:
                try:
                    proc = subprocess.Popen(
                        argv,
                        stdin=subprocess.DEVNULL,
                        stdout=subprocess.PIPE,
                        stderr=err_f,
                    )
                except OSError as e:
                    raise self._failure(safe_cmd, str(e)) from e

                chunks = []
                try:
                    while True:
                        chunk = proc.stdout.read(_CHUNK_SIZE)
                        if not chunk:
                            break
                        stdout_len += len(chunk)
                        if stdout_len > self.max_output_bytes:
                            proc.kill()
                            break
                        chunks.append(chunk)
                finally:
                    proc.stdout.close()
                    exit_code = proc.wait()

                if stdout_len > self.max_output_bytes:
                    raise OutputLimitExceededError(
                        f"smbclient output exceeded {self.max_output_bytes} bytes. "
                        f'cmd="{safe_cmd}"',
                        command=safe_cmd,
                        returncode=exit_code,
                    )

                stdout = b"".join(chunks).decode("utf-8", errors="replace")
                stderr_len = self._size(err_f)
                stderr = self._read(err_f, self.max_output_bytes)

                if exit_code != 0:
                    diagnostic = stderr.strip() or stdout[:4096].strip()
                    raise self._failure(
                        safe_cmd,
                        diagnostic or f"exit status {exit_code}",
                        returncode=exit_code,
                    )

                if stderr and _STDERR_ERROR.search(stderr):
                    raise self._failure(safe_cmd, stderr.strip(), returncode=exit_code)

                return stdout
        finally:
            duration = (datetime.now() - start_time).total_seconds()
            exit_str = f"{exit_code}" if exit_code is not None else "n/a"
            logger.debug(
                f"smbclient finished in {duration:.2f}s "
                f"(exit={exit_str}, stdout={stdout_len}B, stderr={stderr_len}B)"
            )

    def _failure(
            self,
            safe_cmd: str,
            diagnostic: str,
            returncode: Optional[int] = None,
    ) -> SmbCommandError:
        diagnostic = redact(diagnostic, self.secrets)
        message = f'smbclient failed. cmd="{safe_cmd}" stderr="{diagnostic}"'

        hint = find_hint(diagnostic)
        if hint:
            message = f"{hint} ({message})"

        return SmbCommandError(
            message,
            command=safe_cmd,
            diagnostic=diagnostic,
            returncode=returncode,
            hint=hint,
        )

    @staticmethod
    def _size(f) -> int:
        f.flush()
        return os.fstat(f.fileno()).st_size

    @staticmethod
    def _read(f, limit: int) -> str:
        f.seek(0)
        return f.read(limit).decode("utf-8", errors="replace")
