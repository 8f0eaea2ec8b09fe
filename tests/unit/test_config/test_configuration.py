import pytest

from smbbridge.config.configuration import AuthConfig, BridgeConfiguration
from smbbridge.errors import ConfigurationError
from smbbridge.transport.runner import DEFAULT_MAX_OUTPUT_BYTES


def write(tmp_path, text):
    path = tmp_path / "bridge.toml"
    path.write_text(text)
    return path


def test_defaults():
    cfg = BridgeConfiguration()

    assert cfg.client.smbclient_path == "smbclient"
    assert cfg.client.max_output_bytes == DEFAULT_MAX_OUTPUT_BYTES
    assert cfg.logging.log_level == "info"
    assert cfg.params == {}
    cfg.validate()


def test_load_toml(tmp_path):
    path = write(tmp_path, """
[auth]
host = "fs01"
share = "data"
domain = "CORP"
username = "alice"
password = "pw"
port = 445

[client]
smbclient_path = "/usr/bin/smbclient"
max_output_bytes = 2048

[logging]
log_level = "debug"

[params]
directory = "/reports"
""")

    cfg = BridgeConfiguration.load(path)
    cfg.validate()
    creds = cfg.auth.to_credentials()

    assert creds.host == "fs01"
    assert creds.domain == "CORP"
    assert creds.port == 445
    assert cfg.client.max_output_bytes == 2048
    assert cfg.logging.log_level == "debug"
    assert cfg.params == {"directory": "/reports"}


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        BridgeConfiguration.load(tmp_path / "nope.toml")


def test_invalid_toml(tmp_path):
    with pytest.raises(ConfigurationError, match="Invalid TOML"):
        BridgeConfiguration.load(write(tmp_path, "[auth\nhost ="))


def test_unknown_section(tmp_path):
    with pytest.raises(ConfigurationError, match="Unknown config section"):
        BridgeConfiguration.load(write(tmp_path, "[scanning]\nmax_threads = 4\n"))


def test_unknown_key(tmp_path):
    with pytest.raises(ConfigurationError, match="auth.hostname"):
        BridgeConfiguration.load(write(tmp_path, "[auth]\nhostname = \"x\"\n"))


def test_params_must_be_table():
    with pytest.raises(ConfigurationError):
        BridgeConfiguration().merge_dict({"params": "nope"})


@pytest.mark.parametrize("section,key,value", [
    ("client", "max_output_bytes", 0),
    ("client", "smbclient_path", ""),
    ("logging", "log_level", "verbose"),
    ("logging", "log_type", "xml"),
    ("auth", "port", 70000),
    ("auth", "port", "abc"),
])
def test_validate_rejects(section, key, value):
    cfg = BridgeConfiguration()
    setattr(getattr(cfg, section), key, value)

    with pytest.raises(ConfigurationError):
        cfg.validate()


def test_validate_coerces_port():
    cfg = BridgeConfiguration()
    cfg.auth.port = "4445"

    cfg.validate()

    assert cfg.auth.port == 4445


def test_credentials_require_host_and_share():
    with pytest.raises(ConfigurationError):
        AuthConfig(host="fs01").to_credentials()


def test_anonymous_credentials():
    creds = AuthConfig(host="fs01", share="pub").to_credentials()

    assert creds.is_anonymous
    assert creds.secrets() == ()


def test_credentials_repr_hides_password():
    creds = AuthConfig(host="fs01", share="pub", username="bob", password="hunter2").to_credentials()

    assert "hunter2" not in repr(creds)


def test_validate_coerces_max_output_bytes(tmp_path):
    cfg = BridgeConfiguration.load(write(tmp_path, '[client]\nmax_output_bytes = "4096"\n'))

    cfg.validate()

    assert cfg.client.max_output_bytes == 4096


@pytest.mark.parametrize("value", ["lots", None, "-1"])
def test_validate_rejects_bad_max_output_bytes(value):
    cfg = BridgeConfiguration()
    cfg.client.max_output_bytes = value

    with pytest.raises(ConfigurationError, match="max_output_bytes"):
        cfg.validate()
