"""Tests for binaries/installer.py - the install and update pipeline."""

from __future__ import annotations

import gzip
import io
import stat
import sys
import tarfile
from pathlib import Path
from unittest.mock import patch

import pytest

from grab.binaries.installer import BinaryInstaller, InstallPhase
from grab.binaries.state import get_installed_version, set_installed_version
from grab.core.manifest import Binary
from grab.core.result import Err, Ok
from grab.github.http import HttpError, MockHttpClient
from grab.output.console import MockConsole
from grab.platform.detection import Host

HOST = Host("linux", "amd64")


def make_binary(
    name: str = "foo", version: str = "1.2.3", suffix: str = "", **kw: object
) -> Binary:
    return Binary(
        name=name,
        org="bar",
        repo=name,
        version=version,
        source=f"https://example.com/{name}/v{{{{ .Version }}}}/{name}-{{{{ .Platform }}}}{suffix}",
        **kw,  # type: ignore[arg-type]
    )


def url_for(binary: Binary, suffix: str = "") -> str:
    return f"https://example.com/{binary.name}/v{binary.version}/{binary.name}-linux{suffix}"


def make_tgz(name: str, content: bytes) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        info = tarfile.TarInfo(f"release/{name}")
        info.size = len(content)
        tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


@pytest.fixture
def http() -> MockHttpClient:
    return MockHttpClient()


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    return tmp_path / "home" / ".local" / "bin"


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "state.json"


@pytest.fixture
def installer(
    http: MockHttpClient, console: MockConsole, bin_dir: Path, state_path: Path
) -> BinaryInstaller:
    return BinaryInstaller(http, HOST, bin_dir, console, state_path=state_path)


class TestInstall:
    def test_raw_binary(
        self,
        installer: BinaryInstaller,
        http: MockHttpClient,
        console: MockConsole,
        bin_dir: Path,
    ) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), b"#!/bin/sh\necho foo\n")

        result = installer.install([binary])

        assert isinstance(result, Ok)
        assert result.value.installed == ["foo"]
        dest = bin_dir / "foo"
        assert dest.read_bytes() == b"#!/bin/sh\necho foo\n"
        assert "Installing foo..." in console.messages
        assert "OK foo has been installed" in console.messages

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
    def test_written_executable(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), b"bin")

        installer.install([binary])

        assert stat.S_IMODE((bin_dir / "foo").stat().st_mode) == 0o755

    def test_tar_gz_uses_file_name_for_host(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        binary = make_binary(suffix=".tar.gz", file_name={"linux,amd64": "foo_linux_amd64"})
        http.set_response(url_for(binary, ".tar.gz"), make_tgz("foo_linux_amd64", b"from-tar"))

        result = installer.install([binary])

        assert isinstance(result, Ok)
        assert (bin_dir / "foo").read_bytes() == b"from-tar"

    def test_gzip_payload(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        binary = make_binary(suffix=".gz")
        http.set_response(url_for(binary, ".gz"), gzip.compress(b"gunzipped"))

        installer.install([binary])

        assert (bin_dir / "foo").read_bytes() == b"gunzipped"

    def test_records_installed_version(
        self, installer: BinaryInstaller, http: MockHttpClient, state_path: Path
    ) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), b"bin")

        installer.install([binary])

        assert get_installed_version(state_path, "foo") == "1.2.3"

    def test_second_run_is_idempotent(
        self,
        installer: BinaryInstaller,
        http: MockHttpClient,
        console: MockConsole,
        bin_dir: Path,
    ) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), b"bin")
        installer.install([binary])
        mtime = (bin_dir / "foo").stat().st_mtime_ns
        http.calls.clear()

        result = installer.install([binary])

        assert isinstance(result, Ok)
        assert result.value.skipped == ["foo"]
        assert not result.value.changed
        assert http.calls == []
        assert (bin_dir / "foo").stat().st_mtime_ns == mtime
        assert "foo already installed" in console.messages

    def test_existing_file_never_fetched(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        bin_dir.mkdir(parents=True)
        (bin_dir / "foo").write_bytes(b"hand-installed")

        result = installer.install([make_binary(version="9.9.9")])

        assert isinstance(result, Ok)
        assert http.calls == []
        assert (bin_dir / "foo").read_bytes() == b"hand-installed"

    def test_stops_at_first_failure(
        self,
        installer: BinaryInstaller,
        http: MockHttpClient,
        bin_dir: Path,
    ) -> None:
        first, second, third = make_binary("one"), make_binary("two"), make_binary("three")
        http.set_response(url_for(first), HttpError(url_for(first), "connection refused"))
        http.set_response(url_for(second), b"two")
        http.set_response(url_for(third), b"three")

        result = installer.install([first, second, third])

        assert isinstance(result, Err)
        assert result.error.binary == "one"
        assert result.error.phase == InstallPhase.FETCH
        assert http.calls == [url_for(first)]
        assert not (bin_dir / "two").exists()
        assert not (bin_dir / "three").exists()

    def test_earlier_binaries_kept_on_failure(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        good, bad = make_binary("good"), make_binary("bad", suffix=".gz")
        http.set_response(url_for(good), b"good")
        http.set_response(url_for(bad, ".gz"), b"not gzip")

        result = installer.install([good, bad])

        assert isinstance(result, Err)
        assert result.error.phase == InstallPhase.EXTRACT
        assert (bin_dir / "good").read_bytes() == b"good"
        assert not (bin_dir / "bad").exists()

    def test_template_error_is_resolve_failure(
        self, installer: BinaryInstaller, http: MockHttpClient
    ) -> None:
        binary = Binary(name="foo", org="bar", repo="foo", version="1.0.0", source="v{{ .Version")

        result = installer.install([binary])

        assert isinstance(result, Err)
        assert result.error.phase == InstallPhase.RESOLVE
        assert "error parsing source template" in result.error.message
        assert http.calls == []

    def test_missing_tar_entry_is_extract_failure(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        binary = make_binary(suffix=".tar.gz")
        http.set_response(url_for(binary, ".tar.gz"), make_tgz("something-else", b"x"))

        result = installer.install([binary])

        assert isinstance(result, Err)
        assert result.error.phase == InstallPhase.EXTRACT
        assert "'foo'" in result.error.message
        assert not (bin_dir / "foo").exists()

    def test_http_error_status_still_written(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), b"Not Found", status=404)

        result = installer.install([binary])

        assert isinstance(result, Ok)
        assert (bin_dir / "foo").read_bytes() == b"Not Found"

    def test_write_failure(self, installer: BinaryInstaller, http: MockHttpClient) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), b"bin")

        with patch(
            "grab.binaries.installer.atomic_write_bytes",
            side_effect=PermissionError("read-only file system"),
        ):
            result = installer.install([binary])

        assert isinstance(result, Err)
        assert result.error.phase == InstallPhase.WRITE
        assert result.error.message.startswith("error writing binary to disk")

    def test_empty_manifest(self, installer: BinaryInstaller, http: MockHttpClient) -> None:
        result = installer.install([])

        assert isinstance(result, Ok)
        assert not result.value.changed
        assert http.calls == []

    def test_failure_str(self, installer: BinaryInstaller, http: MockHttpClient) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), HttpError(url_for(binary), "timed out"))

        result = installer.install([binary])

        assert isinstance(result, Err)
        assert str(result.error).startswith("fetch failed for foo: timed out")


class TestUpdate:
    def test_installs_missing(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), b"bin")

        result = installer.update([binary])

        assert isinstance(result, Ok)
        assert result.value.installed == ["foo"]
        assert (bin_dir / "foo").exists()

    def test_replaces_when_version_differs(
        self,
        installer: BinaryInstaller,
        http: MockHttpClient,
        console: MockConsole,
        bin_dir: Path,
        state_path: Path,
    ) -> None:
        bin_dir.mkdir(parents=True)
        (bin_dir / "foo").write_bytes(b"old")
        set_installed_version(state_path, "foo", "1.0.0")
        binary = make_binary(version="1.2.3")
        http.set_response(url_for(binary), b"new")

        result = installer.update([binary])

        assert isinstance(result, Ok)
        assert result.value.updated == ["foo"]
        assert (bin_dir / "foo").read_bytes() == b"new"
        assert get_installed_version(state_path, "foo") == "1.2.3"
        assert "Updating foo 1.0.0 -> 1.2.3..." in console.messages

    def test_replaces_downgrade(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path, state_path: Path
    ) -> None:
        bin_dir.mkdir(parents=True)
        (bin_dir / "foo").write_bytes(b"newer")
        set_installed_version(state_path, "foo", "9.9.9")
        binary = make_binary(version="1.2.3")
        http.set_response(url_for(binary), b"pinned")

        result = installer.update([binary])

        assert isinstance(result, Ok)
        assert result.value.updated == ["foo"]
        assert (bin_dir / "foo").read_bytes() == b"pinned"

    def test_same_version_skipped(
        self,
        installer: BinaryInstaller,
        http: MockHttpClient,
        console: MockConsole,
        bin_dir: Path,
        state_path: Path,
    ) -> None:
        bin_dir.mkdir(parents=True)
        (bin_dir / "foo").write_bytes(b"bin")
        set_installed_version(state_path, "foo", "v1.2.3")

        result = installer.update([make_binary(version="1.2.3")])

        assert isinstance(result, Ok)
        assert result.value.skipped == ["foo"]
        assert http.calls == []
        assert "foo v1.2.3 is up to date" in console.messages

    def test_untracked_binary_left_alone(
        self,
        installer: BinaryInstaller,
        http: MockHttpClient,
        console: MockConsole,
        bin_dir: Path,
    ) -> None:
        bin_dir.mkdir(parents=True)
        (bin_dir / "foo").write_bytes(b"hand-installed")

        result = installer.update([make_binary()])

        assert isinstance(result, Ok)
        assert result.value.untracked == ["foo"]
        assert http.calls == []
        assert console.has_warning()

    def test_malformed_recorded_version(
        self, installer: BinaryInstaller, bin_dir: Path, state_path: Path
    ) -> None:
        bin_dir.mkdir(parents=True)
        (bin_dir / "foo").write_bytes(b"bin")
        set_installed_version(state_path, "foo", "nightly")

        result = installer.update([make_binary()])

        assert isinstance(result, Err)
        assert result.error.phase == InstallPhase.VERSION
        assert "nightly" in result.error.message

    def test_without_state_tracking(
        self, http: MockHttpClient, console: MockConsole, bin_dir: Path
    ) -> None:
        installer = BinaryInstaller(http, HOST, bin_dir, console)
        bin_dir.mkdir(parents=True)
        (bin_dir / "foo").write_bytes(b"bin")

        result = installer.update([make_binary()])

        assert isinstance(result, Ok)
        assert result.value.untracked == ["foo"]


class TestCorruptState:
    @pytest.fixture(autouse=True)
    def corrupt_state(self, state_path: Path) -> None:
        state_path.parent.mkdir(parents=True)
        state_path.write_bytes(b"\xff\xfe{not utf8")

    def test_install_rewrites_state(
        self, installer: BinaryInstaller, http: MockHttpClient, state_path: Path
    ) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), b"bin")

        result = installer.install([binary])

        assert isinstance(result, Ok)
        assert result.value.installed == ["foo"]
        assert get_installed_version(state_path, "foo") == "1.2.3"

    def test_update_treats_existing_file_as_untracked(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        bin_dir.mkdir(parents=True)
        (bin_dir / "foo").write_bytes(b"bin")

        result = installer.update([make_binary()])

        assert isinstance(result, Ok)
        assert result.value.untracked == ["foo"]
        assert http.calls == []

    def test_update_installs_missing(
        self, installer: BinaryInstaller, http: MockHttpClient, bin_dir: Path
    ) -> None:
        binary = make_binary()
        http.set_response(url_for(binary), b"bin")

        result = installer.update([binary])

        assert isinstance(result, Ok)
        assert result.value.installed == ["foo"]
        assert (bin_dir / "foo").read_bytes() == b"bin"
