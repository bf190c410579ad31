"""Minimal placeholder templates.

Manifest templates use the Go ``text/template`` field syntax that release
URLs are usually written in::

    https://github.com/{{ .Org }}/{{ .Repo }}/releases/download/v{{ .Version }}/x-{{ .Platform }}

Only literal text and single field references are supported. A template is
compiled once and rendered against a mapping of variables; the two stages
fail with distinct error types:

- TemplateParseError: the template text itself is malformed
- TemplateRenderError: the template references a variable that is not defined

``{{-`` and ``-}}`` trim the whitespace before/after an action, as in Go.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from .result import Err, Ok, Result

__all__ = [
    "FieldRef",
    "Literal",
    "Template",
    "TemplateError",
    "TemplateParseError",
    "TemplateRenderError",
    "compile_template",
    "render_template",
]

_OPEN = "{{"
_CLOSE = "}}"
_FIELD_RE = re.compile(r"^\.([A-Za-z_][A-Za-z0-9_]*)$")


@dataclass(frozen=True, slots=True)
class TemplateParseError:
    """Template text could not be compiled.

    Attributes:
        template: The offending template text
        offset: Character offset of the problem
        reason: What went wrong
    """

    template: str
    offset: int
    reason: str

    @property
    def message(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return f"error parsing source template: {self.reason} at offset {self.offset}"


@dataclass(frozen=True, slots=True)
class TemplateRenderError:
    """Template referenced a variable missing from the view model.

    Attributes:
        template: The template text
        field: Name of the undefined field
    """

    template: str
    field: str

    @property
    def message(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return f"error rendering source template: can't evaluate field {self.field}"


TemplateError = TemplateParseError | TemplateRenderError


@dataclass(frozen=True, slots=True)
class Literal:
    text: str


@dataclass(frozen=True, slots=True)
class FieldRef:
    name: str
    offset: int


Node = Literal | FieldRef


@dataclass(frozen=True, slots=True)
class Template:
    """A compiled template: a flat sequence of literals and field references."""

    source: str
    nodes: tuple[Node, ...]

    @property
    def fields(self) -> tuple[str, ...]:
        """Names of referenced fields, in order of appearance."""
        return tuple(node.name for node in self.nodes if isinstance(node, FieldRef))

    def render(self, variables: Mapping[str, str]) -> Result[str, TemplateRenderError]:
        parts: list[str] = []
        for node in self.nodes:
            match node:
                case Literal(text=text):
                    parts.append(text)
                case FieldRef(name=name):
                    if name not in variables:
                        return Err(TemplateRenderError(template=self.source, field=name))
                    parts.append(variables[name])
        return Ok("".join(parts))


def compile_template(source: str) -> Result[Template, TemplateParseError]:
    """Compile template text into a Template.

    Args:
        source: Template text

    Returns:
        Ok with the compiled Template, or Err with TemplateParseError
    """
    nodes: list[Node] = []
    pos = 0
    trim_next = False

    while pos < len(source):
        start = source.find(_OPEN, pos)
        text = source[pos:] if start == -1 else source[pos:start]
        if trim_next:
            text = text.lstrip()
            trim_next = False
        if start == -1:
            if text:
                nodes.append(Literal(text))
            break

        end = source.find(_CLOSE, start + len(_OPEN))
        if end == -1:
            return Err(TemplateParseError(source, start, "unclosed action"))

        inner = source[start + len(_OPEN) : end]
        if inner.startswith("- "):
            text = text.rstrip()
            inner = inner[2:]
        if inner.endswith(" -"):
            trim_next = True
            inner = inner[:-2]
        if text:
            nodes.append(Literal(text))

        action = inner.strip()
        if not action:
            return Err(TemplateParseError(source, start, "missing value for command"))
        if _OPEN in action:
            return Err(TemplateParseError(source, start, "unexpected '{{' in action"))
        m = _FIELD_RE.match(action)
        if m is None:
            return Err(TemplateParseError(source, start, f"unsupported action {action!r}"))

        nodes.append(FieldRef(name=m.group(1), offset=start))
        pos = end + len(_CLOSE)

    return Ok(Template(source=source, nodes=tuple(nodes)))


def render_template(source: str, variables: Mapping[str, str]) -> Result[str, TemplateError]:
    """Compile and render in one step."""
    compiled = compile_template(source)
    if isinstance(compiled, Err):
        return compiled
    return compiled.value.render(variables)
