"""
Operation dispatcher
Maps an operation to its handler and runs it over every input item in order
"""

import logging
from typing import List, Optional

from smbbridge.client.share_client import ShareClient
from smbbridge.engine.context import ExecutionContext, Item
from smbbridge.engine.handlers import HANDLERS, OpHandler
from smbbridge.errors import OperationFailedError, UnsupportedOperationError
from smbbridge.model.share import Operation
from smbbridge.transport.runner import DEFAULT_MAX_OUTPUT_BYTES

logger = logging.getLogger("smbbridge")


def resolve_handler(operation) -> OpHandler:
    try:
        op = Operation(operation)
    except ValueError:
        raise UnsupportedOperationError(operation) from None

    handler = HANDLERS.get(op)
    if handler is None:
        raise UnsupportedOperationError(operation)
    return handler


def build_client(
        ctx: ExecutionContext,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> ShareClient:
    smbclient_path = ctx.get_parameter("smbclientPath", 0, "smbclient") or "smbclient"
    credentials = ctx.get_credentials()
    logger.debug(
        f"Using //{credentials.host}/{credentials.share} "
        f"(domain={credentials.domain or '-'}) via {smbclient_path}"
    )
    return ShareClient(
        credentials,
        smbclient_path=smbclient_path,
        max_output_bytes=max_output_bytes,
    )


class OperationDispatcher:

    def __init__(
            self,
            ctx: ExecutionContext,
            client: Optional[ShareClient] = None,
            max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    ):
        self.ctx = ctx
        self.client = client
        self.max_output_bytes = max_output_bytes

    def execute(self) -> List[Item]:
        """
        Run the configured operation over all input items

        Returns:
            One output item per input item

        Raises:
            UnsupportedOperationError: before any item is touched
            OperationFailedError: when any item fails; the batch is aborted
        """
        operation = self.ctx.get_parameter("operation", 0)
        handler = resolve_handler(operation)
        operation = Operation(operation).value

        items = self.ctx.get_input_data()
        client = self.client or build_client(self.ctx, self.max_output_bytes)

        logger.info(f"Running '{operation}' on {len(items)} item(s)")

        out: List[Item] = []
        try:
            for i in range(len(items)):
                out.append(handler(self.ctx, i, client))
        except Exception as e:
            logger.error(
                f"Operation '{operation}' failed: {e}",
                extra={"operation": operation},
            )
            raise OperationFailedError(str(e) or "SMB operation failed") from e
        finally:
            try:
                client.close()
            except Exception as e:
                logger.debug(f"Ignoring close failure: {e}")

        return out
