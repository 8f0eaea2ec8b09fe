"""
Per-operation item handlers
"""

import logging
from pathlib import Path
from typing import Callable, Dict

from smbbridge.client.share_client import ShareClient
from smbbridge.engine.context import ExecutionContext, Item
from smbbridge.errors import ConfigurationError, MissingBinaryPropertyError
from smbbridge.model.share import Operation, entries_to_dicts
from smbbridge.utils.path_utils import discard_temp, make_temp_path, remote_basename

logger = logging.getLogger("smbbridge")

OpHandler = Callable[[ExecutionContext, int, ShareClient], Item]


def _str(ctx: ExecutionContext, index: int, name: str, default: str = "") -> str:
    value = ctx.get_parameter(name, index, default)
    return default if value is None else str(value)


def _required(ctx: ExecutionContext, index: int, name: str) -> str:
    value = _str(ctx, index, name)
    if not value:
        raise ConfigurationError(f"Parameter '{name}' is required (item {index})")
    return value


def handle_stat(ctx: ExecutionContext, index: int, client: ShareClient) -> Item:
    remote_path = _required(ctx, index, "remotePath")
    stat = client.stat(remote_path)
    return Item(json={"remotePath": remote_path, **stat.to_dict()})


def handle_list(ctx: ExecutionContext, index: int, client: ShareClient) -> Item:
    directory = _str(ctx, index, "directory", "/")
    entries = client.list(directory)
    logger.debug(
        f"Listed {len(entries)} entries in {directory}",
        extra={"operation": "list", "item_index": index, "remote_path": directory},
    )
    return Item(json={"directory": directory, "entries": entries_to_dicts(entries)})


def handle_get(ctx: ExecutionContext, index: int, client: ShareClient) -> Item:
    remote_path = _required(ctx, index, "remotePath")
    out_prop = _str(ctx, index, "outBinaryPropertyName", "data")
    out_file = _str(ctx, index, "outFileName") or remote_basename(remote_path)
    out_mime = _str(ctx, index, "outMimeType", "application/octet-stream")

    tmp = make_temp_path("get")
    try:
        client.get(remote_path, tmp)
        buf = Path(tmp).read_bytes()
    finally:
        discard_temp(tmp)

    binary = ctx.prepare_binary_data(buf, out_file, out_mime)
    return Item(
        json={"fileName": out_file, "remotePath": remote_path},
        binary={out_prop: binary},
    )


def handle_put(ctx: ExecutionContext, index: int, client: ShareClient) -> Item:
    remote_path = _required(ctx, index, "remotePath")
    source = _str(ctx, index, "putSource", "binary")

    if source == "binary":
        bin_prop = _str(ctx, index, "binaryPropertyName", "data")
        item = ctx.get_input_data()[index]
        if not item.binary or bin_prop not in item.binary:
            raise MissingBinaryPropertyError(bin_prop, index)
        payload = ctx.get_binary_data_buffer(index, bin_prop)
    elif source == "text":
        payload = _str(ctx, index, "textContent").encode("utf-8")
    else:
        raise ConfigurationError(f"Unsupported put source: {source}")

    tmp = make_temp_path("put")
    try:
        Path(tmp).write_bytes(payload)
        client.put(tmp, remote_path)
    finally:
        discard_temp(tmp)

    return Item(json={"remotePath": remote_path, "uploaded": True})


def handle_mkdir(ctx: ExecutionContext, index: int, client: ShareClient) -> Item:
    directory = _required(ctx, index, "directory")
    client.mkdir(directory)
    return Item(json={"directory": directory, "created": True})


def handle_rmdir(ctx: ExecutionContext, index: int, client: ShareClient) -> Item:
    directory = _required(ctx, index, "directory")
    client.rmdir(directory)
    return Item(json={"directory": directory, "removed": True})


def handle_del(ctx: ExecutionContext, index: int, client: ShareClient) -> Item:
    remote_path = _required(ctx, index, "remotePath")
    client.delete(remote_path)
    return Item(json={"remotePath": remote_path, "deleted": True})


HANDLERS: Dict[Operation, OpHandler] = {
    Operation.STAT: handle_stat,
    Operation.LIST: handle_list,
    Operation.GET: handle_get,
    Operation.PUT: handle_put,
    Operation.MKDIR: handle_mkdir,
    Operation.RMDIR: handle_rmdir,
    Operation.DELETE: handle_del,
}
