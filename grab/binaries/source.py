"""Download URL and release name resolution.

A binary's ``source`` and ``release_name`` are templates rendered against a
small view model:

- Version: the declared version
- Platform, Arch: host OS/arch, or the binary's override pair for this host
- Name, Org, Repo: the declaration's identity fields

Resolution is a pure function of (declaration, host).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from grab.core.result import Err, Ok, Result
from grab.core.template import TemplateError, compile_template

if TYPE_CHECKING:
    from grab.core.manifest import Binary, PlatformOverrides
    from grab.platform.detection import Host

__all__ = [
    "UrlViewModel",
    "archive_entry_name",
    "platform_aliases",
    "release_version",
    "resolve_release_name",
    "resolve_url",
]

logger = logging.getLogger(__name__)

# Stand-in used to locate the version inside a rendered release name
_VERSION_MARK = "\x00version\x00"


@dataclass(frozen=True, slots=True)
class UrlViewModel:
    version: str
    platform: str
    arch: str
    name: str = ""
    org: str = ""
    repo: str = ""

    def variables(self) -> dict[str, str]:
        return {
            "Version": self.version,
            "Platform": self.platform,
            "Arch": self.arch,
            "Name": self.name,
            "Org": self.org,
            "Repo": self.repo,
        }

    @classmethod
    def for_binary(cls, binary: Binary, host: Host, *, version: str | None = None) -> UrlViewModel:
        platform, arch = platform_aliases(binary.platforms, host)
        return cls(
            version=binary.version if version is None else version,
            platform=platform,
            arch=arch,
            name=binary.name,
            org=binary.org,
            repo=binary.repo,
        )


def platform_aliases(overrides: PlatformOverrides, host: Host) -> tuple[str, str]:
    """Return the (platform, arch) pair templates see on this host.

    Uses overrides[os][arch] when both levels exist, the raw host values otherwise.
    """
    return overrides.get(host.os, {}).get(host.arch, (host.os, host.arch))


def _render(source: str, view: UrlViewModel) -> Result[str, TemplateError]:
    compiled = compile_template(source)
    if isinstance(compiled, Err):
        return compiled
    return compiled.value.render(view.variables())


def resolve_url(binary: Binary, host: Host) -> Result[str, TemplateError]:
    """Render the binary's source template into a download URL.

    Returns:
        Ok with the URL, or Err with TemplateParseError (malformed template)
        or TemplateRenderError (undefined variable)
    """
    result = _render(binary.source, UrlViewModel.for_binary(binary, host))
    if isinstance(result, Ok):
        logger.debug("resolved %s source for %s: %s", binary.name, host, result.value)
    return result


def resolve_release_name(binary: Binary, host: Host) -> Result[str, TemplateError]:
    """Render the binary's release_name template into a release tag."""
    return _render(binary.release_name, UrlViewModel.for_binary(binary, host))


def release_version(binary: Binary, host: Host, tag: str) -> str:
    """Recover the version a release tag was published for.

    The release_name template is rendered with a marker in place of the
    version; whatever the tag holds between the surrounding text is the
    version. Tags that do not fit the template fall back to stripping a
    leading "v".
    """
    view = UrlViewModel.for_binary(binary, host, version=_VERSION_MARK)
    rendered = _render(binary.release_name, view)
    if isinstance(rendered, Ok) and rendered.value.count(_VERSION_MARK) == 1:
        prefix, suffix = rendered.value.split(_VERSION_MARK)
        if (
            len(tag) > len(prefix) + len(suffix)
            and tag.startswith(prefix)
            and tag.endswith(suffix)
        ):
            return tag[len(prefix) : len(tag) - len(suffix)]
    return tag.removeprefix("v")


def archive_entry_name(binary: Binary, host: Host) -> str:
    """File name to look for inside a tar archive on this host."""
    return binary.file_name.get(host.key, binary.name)
