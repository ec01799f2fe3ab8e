"""Tests for reading RPC connection settings from namecoin.conf."""

from pathlib import Path

from nmcrpc.shared.settings import (
    DEFAULT_PORT_MAINNET,
    DEFAULT_PORT_TESTNET,
    RpcSettings,
)


def write_conf(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestRpcSettings:
    def test_defaults(self):
        settings = RpcSettings()
        assert settings.url == "http://localhost:8336"
        assert settings.auth == ("", "")

    def test_read_config(self, tmp_path):
        conf = write_conf(
            tmp_path / "namecoin.conf",
            "rpcuser=alice\nrpcpassword=s3cret\nrpcconnect=10.0.0.2\nrpcport=9000\n",
        )
        settings = RpcSettings()
        settings.read_config(conf)

        assert settings.username == "alice"
        assert settings.password == "s3cret"
        assert settings.host == "10.0.0.2"
        assert settings.port == 9000
        assert settings.url == "http://10.0.0.2:9000"

    def test_values_are_stripped(self, tmp_path):
        conf = write_conf(tmp_path / "namecoin.conf", "  rpcuser = bob \n")
        settings = RpcSettings()
        settings.read_config(conf)
        assert settings.username == "bob"

    def test_testnet_port(self, tmp_path):
        conf = write_conf(tmp_path / "namecoin.conf", "testnet=1\n")
        settings = RpcSettings()
        settings.read_config(conf)
        assert settings.port == DEFAULT_PORT_TESTNET

    def test_testnet_off(self, tmp_path):
        conf = write_conf(tmp_path / "namecoin.conf", "testnet=0\n")
        settings = RpcSettings(port=1234)
        settings.read_config(conf)
        assert settings.port == DEFAULT_PORT_MAINNET

    def test_explicit_port_wins_over_testnet(self, tmp_path):
        conf = write_conf(tmp_path / "namecoin.conf", "rpcport=9000\ntestnet=1\n")
        settings = RpcSettings()
        settings.read_config(conf)
        assert settings.port == 9000

    def test_ignores_unknown_and_malformed_lines(self, tmp_path):
        conf = write_conf(
            tmp_path / "namecoin.conf",
            "# comment\nserver=1\nrpcport=abc\njust garbage\nrpcuser=carol\n",
        )
        settings = RpcSettings()
        settings.read_config(conf)

        assert settings.username == "carol"
        assert settings.port == DEFAULT_PORT_MAINNET

    def test_missing_file_is_ignored(self, tmp_path):
        settings = RpcSettings(username="keep")
        settings.read_config(tmp_path / "does-not-exist.conf")
        assert settings.username == "keep"

    def test_default_config_location(self, tmp_path):
        write_conf(tmp_path / ".namecoin" / "namecoin.conf", "rpcuser=home\n")
        settings = RpcSettings.from_default_config()
        assert settings.username == "home"

    def test_config_file_override(self, tmp_path, monkeypatch):
        write_conf(tmp_path / ".namecoin" / "namecoin.conf", "rpcuser=home\n")
        override = write_conf(tmp_path / "other.conf", "rpcuser=override\n")
        monkeypatch.setenv("NMCRPC_CONFIG_FILE", str(override))

        settings = RpcSettings.from_default_config()

        assert settings.username == "override"
