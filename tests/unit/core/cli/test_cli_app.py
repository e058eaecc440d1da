import json
import re

import pytest
from typer.testing import CliRunner

from spfiles import __version__
from spfiles.core.cli.app import app

runner = CliRunner()

CLI_ENV = {"TERM": "dumb", "NO_COLOR": "1"}


def _invoke(args, **kwargs):
    return runner.invoke(app, args, color=False, env=CLI_ENV, **kwargs)


def _file_json(name, length):
    return {
        "d": {
            "Name": name,
            "ServerRelativeUrl": f"/sites/team/Docs/{name}",
            "Length": str(length),
        }
    }


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, temp_config_dir):
    """Point profiles at a temp dir and clear SPFILES_* overrides."""
    monkeypatch.setattr("spfiles.core.config.profiles.CONFIG_DIR", temp_config_dir)
    for name in (
        "SPFILES_SITE_URL",
        "SPFILES_ACCESS_TOKEN",
        "SPFILES_ODATA_MODE",
        "SPFILES_CHUNK_SIZE",
        "SPFILES_HTTP_TIMEOUT",
        "SPFILES_HTTP_RETRIES",
    ):
        monkeypatch.delenv(name, raising=False)
    return temp_config_dir


@pytest.fixture
def site_env(monkeypatch, site_url):
    monkeypatch.setenv("SPFILES_SITE_URL", site_url)
    monkeypatch.setenv("SPFILES_ACCESS_TOKEN", "test_token")


def test_spfiles_cli_version() -> None:
    result = _invoke(["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_spfiles_cli_help_includes_subcommands() -> None:
    result = _invoke(["--help"])

    assert result.exit_code == 0
    assert "upload" in result.output
    assert "profile" in result.output


def test_upload_help_includes_options() -> None:
    result = _invoke(["upload", "--help"])

    assert result.exit_code == 0
    assert "--folder" in result.output
    assert "--chunk-size" in result.output
    assert "--no-overwrite" in result.output


def test_profile_create_list_show_delete(isolated_config) -> None:
    created = _invoke(
        [
            "profile",
            "create",
            "team",
            "--site-url",
            "https://contoso.sharepoint.com/sites/team",
            "--access-token",
            "secret",
            "--chunk-size",
            "5mb",
        ]
    )
    assert created.exit_code == 0
    assert (isolated_config / "profiles" / "team.yaml").exists()

    listed = _invoke(["profile", "list"])
    assert listed.exit_code == 0
    assert listed.output.split() == ["team"]

    shown = _invoke(["profile", "show", "team"])
    assert shown.exit_code == 0
    profile = json.loads(shown.output)
    assert profile["access_token"] == "***"
    assert profile["chunk_size"] == 5 * 1024 * 1024

    deleted = _invoke(["profile", "delete", "team"])
    assert deleted.exit_code == 0
    assert _invoke(["profile", "list"]).output.strip() == ""


def test_profile_show_missing_fails() -> None:
    result = _invoke(["profile", "show", "nope"])

    assert result.exit_code == 1


def test_profile_create_rejects_bad_odata_mode() -> None:
    result = _invoke(
        ["profile", "create", "x", "--site-url", "https://x", "--odata-mode", "bogus"]
    )

    assert result.exit_code == 1


def test_upload_small_file_in_one_request(tmp_path, mock_sp, site_env) -> None:
    source = tmp_path / "notes.txt"
    source.write_bytes(b"hello")
    add = mock_sp.post(
        re.compile(r".*/Files/Add\(overwrite=true,url='notes.txt'\)$"),
        json=_file_json("notes.txt", 5),
    )

    result = _invoke(["upload", str(source), "--folder", "/sites/team/Docs", "-q"])

    assert result.exit_code == 0, result.output
    assert "/sites/team/Docs/notes.txt" in result.output
    assert add.call_count == 1
    assert add.last_request.body == b"hello"


def test_upload_in_chunks(tmp_path, mock_sp, site_env) -> None:
    source = tmp_path / "data.bin"
    source.write_bytes(b"0123456789")
    mock_sp.post(
        re.compile(r".*/Files/Add\(overwrite=false,url='data.bin'\)$"),
        json=_file_json("data.bin", 0),
    )
    start = mock_sp.post(re.compile(r".*/StartUpload\(.*"), json={"StartUpload": 4})
    resume = mock_sp.post(re.compile(r".*/ContinueUpload\(.*"), json={"value": 8})
    finish = mock_sp.post(
        re.compile(r".*/FinishUpload\(.*"), json=_file_json("data.bin", 10)
    )

    result = _invoke(
        [
            "upload",
            str(source),
            "-f",
            "/sites/team/Docs",
            "--chunk-size",
            "4b",
            "--no-overwrite",
            "--quiet",
        ]
    )

    assert result.exit_code == 0, result.output
    assert start.last_request.body == b"0123"
    assert "fileOffset=4" in resume.last_request.url
    assert resume.last_request.body == b"4567"
    assert "fileOffset=8" in finish.last_request.url
    assert finish.last_request.body == b"89"


def test_upload_server_error_exits_with_failure(tmp_path, mock_sp, site_env) -> None:
    source = tmp_path / "notes.txt"
    source.write_bytes(b"hello")
    mock_sp.post(
        re.compile(r".*/Files/Add\(.*"),
        status_code=423,
        json={"error": {"code": "-2147018894", "message": {"value": "Locked"}}},
    )

    result = _invoke(["upload", str(source), "--folder", "/sites/team/Docs", "-q"])

    assert result.exit_code == 1
    assert "Upload failed" in result.output


def test_upload_missing_file(tmp_path, site_env) -> None:
    result = _invoke(["upload", str(tmp_path / "missing.bin"), "-f", "/Docs"])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_upload_from_stdin_requires_name(site_env) -> None:
    result = _invoke(["upload", "-", "-f", "/Docs"], input=b"data")

    assert result.exit_code == 1
    assert "--name is required" in result.output


def test_upload_without_site_url_fails(tmp_path) -> None:
    source = tmp_path / "notes.txt"
    source.write_bytes(b"hello")

    result = _invoke(["upload", str(source), "-f", "/Docs"])

    assert result.exit_code == 1
    assert "No site URL configured" in result.output
