from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from grab import __version__
from grab.cli.app import app
from grab.cli.context import CLIContext
from grab.core.errors import ErrorCode
from grab.github.http import MockHttpClient
from grab.platform.paths import clear_caches

runner = CliRunner()


class TestApp:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_log_level(self) -> None:
        result = runner.invoke(app, ["--log-level", "loud", "install"])
        assert result.exit_code == int(ErrorCode.USER_ERROR)

    def test_invalid_timeout_is_env_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAB_HTTP_TIMEOUT", "soon")
        monkeypatch.setattr("grab.cli.context.configure_logging", lambda level: None)

        result = runner.invoke(app, ["install"])

        assert result.exit_code == int(ErrorCode.ENV_ERROR)

    def test_install_end_to_end(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        manifest = tmp_path / "manifest.toml"
        manifest.write_text(
            '[[binary]]\nname = "foo"\norg = "acme"\nrepo = "foo"\nversion = "1.0.0"\n'
            'source = "https://example.com/foo-{{ .Version }}"\n',
            encoding="utf-8",
        )
        http = MockHttpClient()
        http.set_response("https://example.com/foo-1.0.0", b"binary")

        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.delenv("XDG_STATE_HOME", raising=False)
        monkeypatch.setenv("GRAB_MANIFEST", "")
        monkeypatch.delenv("GRAB_HTTP_TIMEOUT", raising=False)
        monkeypatch.setattr(CLIContext, "http", lambda self: http)
        monkeypatch.setattr("grab.cli.context.configure_logging", lambda level: None)
        clear_caches()
        try:
            result = runner.invoke(app, ["--manifest", str(manifest), "install"])
        finally:
            clear_caches()

        assert result.exit_code == 0, result.output
        assert (tmp_path / ".local" / "bin" / "foo").read_bytes() == b"binary"
        assert (tmp_path / ".local" / "state" / "grab" / "state.json").exists()
