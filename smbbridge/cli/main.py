"""
smbbridge command line: run share operations through smbclient
"""

import json
import mimetypes
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

import smbbridge.utils.logger as logger_mod
from smbbridge.client.share_client import connect_to_share
from smbbridge.config.configuration import BridgeConfiguration
from smbbridge.engine.context import BinaryData, Item, LocalContext
from smbbridge.engine.dispatcher import OperationDispatcher
from smbbridge.errors import SmbBridgeError
from smbbridge.transport.runner import SmbclientRunner
from smbbridge.utils.logger import format_size, print_completion_stats, setup_logging
from smbbridge.utils.path_utils import parse_unc_base

app = typer.Typer(
    name="smbbridge",
    add_completion=False,
    help="Run stat/list/get/put/mkdir/rmdir/del against an SMB share via smbclient.",
)

console = Console()
err_console = Console(stderr=True)

BANNER = "[bold cyan]smbbridge[/bold cyan] [dim]- SMB share operations over smbclient[/dim]"


# ---------- helpers ----------

def _parse_pairs(values: Optional[List[str]], option: str) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for raw in values or []:
        name, sep, value = raw.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected name=value, got {raw!r}", param_hint=option)
        pairs[name.strip()] = value
    return pairs


def _load_attachment(path_str: str, mime_type: Optional[str] = None) -> BinaryData:
    path = Path(path_str)
    if not path.is_file():
        raise typer.BadParameter(f"Attachment not found: {path}")
    guessed, _ = mimetypes.guess_type(path.name)
    return BinaryData(
        data=path.read_bytes(),
        file_name=path.name,
        mime_type=mime_type or guessed or "application/octet-stream",
    )


def _load_items(items_file: Path) -> Tuple[List[Item], List[Dict]]:
    try:
        raw = json.loads(items_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise typer.BadParameter(f"Cannot read items file {items_file}: {e}")

    if not isinstance(raw, list) or not all(isinstance(x, dict) for x in raw):
        raise typer.BadParameter("Items file must contain a JSON list of objects")

    items: List[Item] = []
    params: List[Dict] = []
    for entry in raw:
        entry = dict(entry)
        binary = {}
        for prop, source in (entry.pop("binary", None) or {}).items():
            if isinstance(source, dict):
                binary[prop] = _load_attachment(source.get("path", ""), source.get("mimeType"))
            else:
                binary[prop] = _load_attachment(str(source))
        items.append(Item(json=dict(entry), binary=binary))
        params.append(entry)
    return items, params


def _build_config(
        config: Optional[Path],
        unc: Optional[str],
        host: Optional[str],
        share: Optional[str],
        domain: Optional[str],
        username: Optional[str],
        password: Optional[str],
        port: Optional[int],
        max_protocol: Optional[str],
        smbclient_path: Optional[str],
        log_level: Optional[str],
        log_file: Optional[str],
        log_type: Optional[str],
) -> BridgeConfiguration:
    cfg = BridgeConfiguration.load(config) if config else BridgeConfiguration()

    if unc:
        base = parse_unc_base(unc)
        if not base:
            raise typer.BadParameter(f"Invalid UNC path: {unc}", param_hint="--unc")
        cfg.auth.host, cfg.auth.share, _ = base

    overrides = {
        "host": host,
        "share": share,
        "domain": domain,
        "username": username,
        "password": password,
        "port": port,
        "max_protocol": max_protocol,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(cfg.auth, key, value)

    if smbclient_path:
        cfg.client.smbclient_path = smbclient_path
    if log_level:
        cfg.logging.log_level = log_level
    if log_file:
        cfg.logging.log_file = log_file
    if log_type:
        cfg.logging.log_type = log_type

    cfg.validate()
    return cfg


def _init_logging(cfg: BridgeConfiguration, no_color: bool, no_banner: bool):
    if no_color:
        logger_mod.NO_COLOR = True

    setup_logging(
        log_level=cfg.logging.log_level,
        log_to_file=bool(cfg.logging.log_file),
        log_file_path=cfg.logging.log_file,
        log_to_console=True,
        log_type=cfg.logging.log_type,
    )

    if not no_banner:
        err_console.print(BANNER, highlight=not no_color)


def _fail(message: str):
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _render_binary(item: Item, save_dir: Optional[Path]) -> Dict:
    rendered = {}
    for prop, binary in item.binary.items():
        info = {
            "fileName": binary.file_name,
            "mimeType": binary.mime_type,
            "size": len(binary.data),
        }
        if save_dir:
            save_dir.mkdir(parents=True, exist_ok=True)
            target = save_dir / (binary.file_name or prop)
            target.write_bytes(binary.data)
            info["savedTo"] = str(target)
        rendered[prop] = info
    return rendered


def _print_listing_tables(results: List[Item]):
    for item in results:
        table = Table(title=item.json.get("directory"))
        table.add_column("Name")
        table.add_column("Size", justify="right")
        table.add_column("Attributes")
        table.add_column("Date")
        for entry in item.json.get("entries", []):
            name = entry["name"] + ("/" if entry["isDirectory"] else "")
            table.add_row(
                name,
                format_size(entry["size"]),
                "".join(entry["attributes"]),
                entry.get("date") or "",
            )
        console.print(table)


# ---------- commands ----------

@app.command()
def run(
        operation: str = typer.Argument(..., help="stat | list | get | put | mkdir | rmdir | del"),
        config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML configuration file"),
        unc: Optional[str] = typer.Option(None, "--unc", help="Share as //host/share"),
        host: Optional[str] = typer.Option(None, "--host", help="SMB server"),
        share: Optional[str] = typer.Option(None, "--share", help="Share name"),
        domain: Optional[str] = typer.Option(None, "--domain", "-d"),
        username: Optional[str] = typer.Option(None, "--username", "-u"),
        password: Optional[str] = typer.Option(None, "--password", "-p"),
        port: Optional[int] = typer.Option(None, "--port"),
        max_protocol: Optional[str] = typer.Option(None, "--max-protocol"),
        smbclient_path: Optional[str] = typer.Option(None, "--smbclient-path"),
        param: Optional[List[str]] = typer.Option(None, "--param", "-P", help="Operation parameter name=value"),
        items_file: Optional[Path] = typer.Option(None, "--items", help="JSON list of per-item parameters"),
        attach: Optional[List[str]] = typer.Option(None, "--attach", help="Binary property prop=path"),
        save_dir: Optional[Path] = typer.Option(None, "--save-dir", help="Write downloaded files here"),
        table: bool = typer.Option(False, "--table", help="Render list output as a table"),
        log_level: Optional[str] = typer.Option(None, "--log-level", help="debug | info | warning"),
        output: Optional[str] = typer.Option(None, "--output", "-o", help="Log file"),
        log_type: Optional[str] = typer.Option(None, "--log-type", help="plain | json | all"),
        no_color: bool = typer.Option(False, "--no-color"),
        no_banner: bool = typer.Option(False, "--no-banner", "-q"),
):
    """Run one operation over one or more items."""
    global_params = _parse_pairs(param, "--param")
    attachments = _parse_pairs(attach, "--attach")

    try:
        cfg = _build_config(
            config, unc, host, share, domain, username, password, port,
            max_protocol, smbclient_path, log_level, output, log_type,
        )
        credentials = cfg.auth.to_credentials()
    except SmbBridgeError as e:
        _fail(str(e))

    _init_logging(cfg, no_color, no_banner)

    if items_file:
        if attachments:
            raise typer.BadParameter("--attach and --items are mutually exclusive")
        items, item_params = _load_items(items_file)
    else:
        binary = {prop: _load_attachment(path) for prop, path in attachments.items()}
        items, item_params = [Item(binary=binary)], []

    parameters = dict(cfg.params)
    parameters.update(global_params)
    parameters["operation"] = operation
    parameters["smbclientPath"] = cfg.client.smbclient_path

    ctx = LocalContext(
        credentials,
        parameters=parameters,
        items=items,
        item_parameters=item_params,
    )

    start_time = datetime.now()
    try:
        results = OperationDispatcher(
            ctx, max_output_bytes=cfg.client.max_output_bytes
        ).execute()
    except SmbBridgeError as e:
        _fail(str(e))

    print_completion_stats(start_time, items=len(results))

    if table and operation == "list":
        _print_listing_tables(results)
        return

    rendered = []
    for item in results:
        data = dict(item.json)
        if item.binary:
            data["binary"] = _render_binary(item, save_dir)
        rendered.append(data)

    console.print_json(data=rendered)


@app.command()
def check(
        config: Optional[Path] = typer.Option(None, "--config", "-c"),
        unc: Optional[str] = typer.Option(None, "--unc"),
        host: Optional[str] = typer.Option(None, "--host"),
        share: Optional[str] = typer.Option(None, "--share"),
        domain: Optional[str] = typer.Option(None, "--domain", "-d"),
        username: Optional[str] = typer.Option(None, "--username", "-u"),
        password: Optional[str] = typer.Option(None, "--password", "-p"),
        port: Optional[int] = typer.Option(None, "--port"),
        max_protocol: Optional[str] = typer.Option(None, "--max-protocol"),
        smbclient_path: Optional[str] = typer.Option(None, "--smbclient-path"),
        log_level: Optional[str] = typer.Option(None, "--log-level"),
        no_color: bool = typer.Option(False, "--no-color"),
        no_banner: bool = typer.Option(False, "--no-banner", "-q"),
):
    """Verify that smbclient is installed and the share can be listed."""
    try:
        cfg = _build_config(
            config, unc, host, share, domain, username, password, port,
            max_protocol, smbclient_path, log_level, None, None,
        )
        credentials = cfg.auth.to_credentials()
    except SmbBridgeError as e:
        _fail(str(e))

    _init_logging(cfg, no_color, no_banner)

    path = cfg.client.smbclient_path
    if not SmbclientRunner(smbclient_path=path).is_available():
        _fail(f"smbclient binary not found: {path}")

    try:
        connect_to_share(
            credentials,
            smbclient_path=path,
            verify=True,
            max_output_bytes=cfg.client.max_output_bytes,
        )
    except SmbBridgeError as e:
        _fail(str(e))

    typer.echo(f"Connected to //{credentials.host}/{credentials.share}")


if __name__ == "__main__":
    app()
