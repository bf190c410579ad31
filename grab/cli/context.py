from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from grab.core.errors import ErrorCode
from grab.core.manifest import Manifest, load_manifest
from grab.core.result import Err
from grab.core.settings import Settings, load_settings
from grab.github.client import GitHubClient
from grab.github.http import HttpClient, RealHttpClient
from grab.output.console import ConsoleProtocol, RichConsole
from grab.output.errors import error_exit_code, print_error
from grab.output.logging import configure_logging
from grab.platform.detection import Host, detect
from grab.platform.paths import local_bin_dir, state_file_path


@dataclass(frozen=True, slots=True)
class CLIContext:
    settings: Settings
    host: Host
    console: ConsoleProtocol
    bin_dir: Path
    state_path: Path

    def http(self) -> HttpClient:
        return RealHttpClient(timeout=self.settings.http_timeout)

    def github(self) -> GitHubClient:
        return GitHubClient(self.http(), token=self.settings.github_token)

    def load_manifest(self) -> Manifest:
        """Load the manifest or exit with a user error."""
        result = load_manifest(self.settings.manifest_path)
        if isinstance(result, Err):
            print_error(result.error, self.console)
            raise typer.Exit(code=error_exit_code(result.error))
        return result.value


def build_context() -> CLIContext:
    console = RichConsole()
    settings_result = load_settings(os.environ)
    if isinstance(settings_result, Err):
        print_error(settings_result.error, console)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    settings = settings_result.value
    configure_logging(settings.log_level)

    return CLIContext(
        settings=settings,
        host=detect(),
        console=console,
        bin_dir=local_bin_dir(),
        state_path=state_file_path(),
    )
