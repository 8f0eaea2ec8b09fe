"""Tests for smbbridge.utils.error_hints."""

import pytest

from smbbridge.utils.error_hints import describe_nt_status, find_hint, readable_error


@pytest.mark.parametrize("text,hint", [
    ("session setup failed: NT_STATUS_LOGON_FAILURE", "Logon Failure"),
    ("tree connect failed: NT_STATUS_BAD_NETWORK_NAME", "Bad Network Name"),
    ("NT_STATUS_ACCESS_DENIED opening remote file", "Access Denied"),
    ("NT_STATUS_OBJECT_NAME_NOT_FOUND listing \\missing", "File/Path Not Found"),
    ("NT_STATUS_OBJECT_PATH_NOT_FOUND", "File/Path Not Found"),
    ("NT_STATUS_NOT_A_DIRECTORY", "Not a directory"),
    ("Connection to srv failed (Error NT_STATUS_CONNECTION_REFUSED)", "Connection refused"),
    ("NT_STATUS_IO_TIMEOUT", "Connection timed out"),
    ("connect: ECONNREFUSED", "Connection refused"),
    ("LOGON failure", "Logon Failure"),
])
def test_known_signatures(text, hint):
    assert hint in find_hint(text)


def test_unknown_text_has_no_hint():
    assert find_hint("something unexpected happened") is None
    assert find_hint("") is None


def test_readable_error_keeps_original():
    msg = 'smbclient failed. stderr="NT_STATUS_LOGON_FAILURE"'

    out = readable_error(msg)

    assert out.startswith("Logon Failure")
    assert msg in out


def test_readable_error_passthrough():
    assert readable_error("plain message") == "plain message"


def test_other_nt_status_codes_use_impacket_descriptions():
    text = "NT_STATUS_DISK_FULL writing remote file"

    description = describe_nt_status(text)

    assert description
    assert find_hint(text) == description


def test_unknown_nt_status_has_no_description():
    assert describe_nt_status("NT_STATUS_NOT_A_REAL_CODE_XYZ") is None
