import json
from unittest.mock import MagicMock, patch

import pytest
from keyring.errors import KeyringError
from typer.testing import CliRunner

from rssh import __version__
from rssh.adapters.cli.app import app
from rssh.infrastructure.state import JsonAliasStore

from .conftest import FakeSFTP, MemoryVault, SFTPSession

runner = CliRunner()


class ContextSFTPSession(SFTPSession):
    def __init__(self, sftp):
        super().__init__(sftp)
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


@pytest.fixture
def vault():
    vault = MemoryVault()
    with patch("rssh.adapters.cli.aliases.create_vault", return_value=vault):
        yield vault


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"rssh {__version__}" in result.output


def test_add_list_remove(config_dir, vault):
    result = runner.invoke(app, ["add", "box", "u@10.0.0.1"])
    assert result.exit_code == 0
    assert "Connection 'box' added." in result.output

    stored = json.loads((config_dir / "config.json").read_text())
    assert stored == {"connections": {"box": "u@10.0.0.1"}}

    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "Saved connections:" in result.output
    assert "box -> u@10.0.0.1" in result.output

    result = runner.invoke(app, ["remove", "box"])
    assert result.exit_code == 0
    assert "Connection 'box' removed." in result.output
    assert vault.deleted == ["box"]

    result = runner.invoke(app, ["list"])
    assert "No connections saved." in result.output


def test_add_invalid_connection_string(config_dir):
    result = runner.invoke(app, ["add", "box", "just-a-host"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert not (config_dir / "config.json").exists()


def test_remove_unknown_alias(config_dir, vault):
    result = runner.invoke(app, ["remove", "ghost"])

    assert result.exit_code == 1
    assert "Alias 'ghost' not found." in result.output
    assert vault.deleted == []


def test_connect_unknown_alias(config_dir):
    result = runner.invoke(app, ["connect", "ghost"])

    assert result.exit_code == 1
    assert "Alias 'ghost' not found." in result.output


def test_connect_rejects_port_out_of_range(config_dir):
    result = runner.invoke(app, ["connect", "box", "--port", "70000"])

    assert result.exit_code != 0


def test_download_into_file_fails_without_connecting(config_dir, tmp_path):
    existing = tmp_path / "notes.txt"
    existing.write_text("keep")

    with patch("rssh.adapters.cli.transfer.open_session") as open_session:
        result = runner.invoke(app, ["download", "box", "/etc/hosts", str(existing)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    open_session.assert_not_called()
    assert existing.read_text() == "keep"


def test_upload_directory_fails_without_connecting(config_dir, tmp_path):
    with patch("rssh.adapters.cli.transfer.open_session") as open_session:
        result = runner.invoke(app, ["upload", "box", str(tmp_path), "/tmp"])

    assert result.exit_code == 1
    open_session.assert_not_called()


def test_upload_reports_completion(config_dir, tmp_path):
    source = tmp_path / "report.txt"
    source.write_bytes(b"r" * 1024)
    sftp = FakeSFTP()
    session = ContextSFTPSession(sftp)

    with patch("rssh.adapters.cli.transfer.open_session", return_value=session) as open_session:
        result = runner.invoke(app, ["upload", "box", str(source), "/home/u/in", "-p", "2222"])

    assert result.exit_code == 0, result.output
    assert "Upload complete: /home/u/in/report.txt (1.0 KB)" in result.output
    assert sftp.remote_files["/home/u/in/report.txt"].contents == b"r" * 1024
    assert open_session.call_args.args[:3] == ("box", 2222, None)
    assert session.closed


def test_no_subcommand_without_aliases(config_dir):
    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "No connections saved. Use 'add' command first." in result.output


def test_no_subcommand_chooses_alias(config_dir, vault):
    runner.invoke(app, ["add", "box", "u@10.0.0.1"])
    start_shell = MagicMock()

    with patch("rssh.adapters.cli.connect.start_shell", start_shell):
        result = runner.invoke(app, [], input="1\n2222\nn\n")

    assert result.exit_code == 0, result.output
    start_shell.assert_called_once_with("box", 2222, None)


def test_no_subcommand_rejects_bad_port(config_dir, vault):
    runner.invoke(app, ["add", "box", "u@10.0.0.1"])

    with patch("rssh.adapters.cli.connect.start_shell") as start_shell:
        result = runner.invoke(app, [], input="box\nabc\n")

    assert result.exit_code == 1
    assert "Invalid port number" in result.output
    start_shell.assert_not_called()


def test_remove_with_failing_keychain_still_drops_alias(config_dir):
    runner.invoke(app, ["add", "box", "u@10.0.0.1"])

    with patch(
        "rssh.infrastructure.state.vault.keyring.delete_password",
        side_effect=KeyringError("keychain locked"),
    ):
        result = runner.invoke(app, ["remove", "box"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "box" not in JsonAliasStore(config_dir).load()


def test_download_with_unknown_alias_creates_no_directory(config_dir, tmp_path):
    target_dir = tmp_path / "newdir"

    result = runner.invoke(app, ["download", "ghost", "/var/log/syslog", str(target_dir)])

    assert result.exit_code == 1
    assert "Alias 'ghost' not found." in result.output
    assert not target_dir.exists()
