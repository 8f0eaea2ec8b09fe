from unittest.mock import MagicMock, patch

import pytest

from smbbridge.client.share_client import ShareClient, connect_to_share
from smbbridge.errors import InvalidPathError, SmbCommandError, SmbConnectionError
from smbbridge.model.share import Credentials


# ---------- helpers ----------

def make_client(output="", **cred_kwargs):
    creds = Credentials(**{"host": "srv", "share": "data", **cred_kwargs})
    runner = MagicMock()
    runner.run.return_value = output
    return ShareClient(creds, runner=runner), runner


def last_command(runner):
    return runner.run.call_args[0][1]


# ---------- connection args ----------

def test_connection_args_with_domain():
    client, _ = make_client(username="alice", password="pw", domain="CORP")

    assert client.connection_args() == [r"\\srv\data", "-U", "CORP/alice%pw", "-g"]


def test_connection_args_without_domain():
    client, _ = make_client(username="alice", password="pw")

    assert client.connection_args()[2] == "alice%pw"


def test_connection_args_anonymous():
    client, _ = make_client()

    assert client.connection_args()[1:3] == ["-U", "%"]


def test_connection_args_port_and_protocol():
    client, _ = make_client(username="u", password="p", port=4445, max_protocol="SMB3")

    args = client.connection_args()

    assert args[-4:] == ["-p", "4445", "-m", "SMB3"]


def test_default_runner_receives_secrets():
    creds = Credentials(host="srv", share="data", username="alice", password="pw")

    client = ShareClient(creds, smbclient_path="/usr/local/bin/smbclient")

    assert client.runner.smbclient_path == "/usr/local/bin/smbclient"
    assert "alice" in client.runner.secrets
    assert "pw" in client.runner.secrets


# ---------- commands ----------

def test_list_root_scenario():
    listing = (
        "docs|0|2024-01-01|10:00:00|D\n"
        "a.txt|12|2024-01-01|10:00:00|A\n"
    )
    client, runner = make_client(output=listing, username="u", password="p")

    entries = client.list("/")

    assert last_command(runner) == 'ls "/"'
    assert [e.name for e in entries] == ["docs", "a.txt"]
    assert entries[0].is_directory is True
    assert entries[1].size == 12


def test_list_subdirectory_gets_trailing_separator():
    client, runner = make_client()

    assert client.list("/docs") == []
    assert last_command(runner) == 'ls "/docs/"'


def test_stat_scenario():
    client, runner = make_client(output="SIZE|42\nATTRIBUTES|A\n")

    meta = client.stat("/a.txt")

    assert last_command(runner) == 'allinfo "/a.txt"'
    assert meta.size == 42
    assert meta.is_directory is False


@pytest.mark.parametrize("call,args,expected", [
    ("get", ("/r/a b.txt", "/tmp/x"), 'get "/r/a b.txt" "/tmp/x"'),
    ("put", ("/tmp/x", "/r/a.txt"), 'put "/tmp/x" "/r/a.txt"'),
    ("mkdir", ("/new dir",), 'mkdir "/new dir"'),
    ("rmdir", ("/old",), 'rmdir "/old"'),
    ("delete", ("/old/file.txt",), 'del "/old/file.txt"'),
])
def test_command_strings(call, args, expected):
    client, runner = make_client()

    assert getattr(client, call)(*args) is None
    assert last_command(runner) == expected


@pytest.mark.parametrize("call,args", [
    ("delete", ('/evil"; rm -rf /',)),
    ("stat", ("a;del *",)),
    ("list", ("/docs;rmdir /docs",)),
    ("get", ("/a.txt", "/tmp/x;del /a.txt")),
    ("mkdir", ("/new\ndir",)),
])
def test_unquotable_path_never_reaches_runner(call, args):
    client, runner = make_client()

    with pytest.raises(InvalidPathError):
        getattr(client, call)(*args)

    runner.run.assert_not_called()


def test_runner_errors_propagate():
    client, runner = make_client()
    runner.run.side_effect = SmbCommandError("boom")

    with pytest.raises(SmbCommandError):
        client.mkdir("/x")


def test_context_manager():
    client, _ = make_client()

    with client as c:
        assert c is client


# ---------- connect_to_share ----------

def test_connect_probes_root_listing():
    creds = Credentials(host="srv", share="data", username="u", password="p")

    with patch("smbbridge.client.share_client.ShareClient.list", return_value=[]) as probe:
        client = connect_to_share(creds)

    probe.assert_called_once_with("")
    assert isinstance(client, ShareClient)


def test_connect_without_verify_skips_probe():
    creds = Credentials(host="srv", share="data")

    with patch("smbbridge.client.share_client.ShareClient.list") as probe:
        connect_to_share(creds, verify=False)

    probe.assert_not_called()


def test_connect_failure_is_wrapped_with_hint():
    creds = Credentials(host="srv", share="data", username="u", password="p")
    error = SmbCommandError(
        "Logon Failure - Check your username, password, and domain (smbclient failed.)",
        hint="Logon Failure - Check your username, password, and domain",
    )

    with patch("smbbridge.client.share_client.ShareClient.list", side_effect=error):
        with pytest.raises(SmbConnectionError) as exc:
            connect_to_share(creds)

    message = str(exc.value)
    assert message.startswith("Failed to connect to SMB server: Logon Failure")
    assert message.count("Logon Failure") == 1
    assert exc.value.__cause__ is error


def test_connect_failure_without_hint_gets_one():
    creds = Credentials(host="srv", share="data")

    with patch("smbbridge.client.share_client.ShareClient.list",
               side_effect=SmbCommandError("NT_STATUS_BAD_NETWORK_NAME")):
        with pytest.raises(SmbConnectionError) as exc:
            connect_to_share(creds)

    assert "Bad Network Name" in str(exc.value)
