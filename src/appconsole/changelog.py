"""
Changelog helpers for the release and version-history commands.

Changelogs are Markdown text. Only a small subset is understood: headings,
bullet items, bold/italic/inline code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from rich.console import Group, RenderableType
from rich.text import Text

from appconsole.errors import ChangelogError

MAX_CHANGELOG_LENGTH = 5000

_INLINE_RULES = [
    (re.compile(r"^### (.*)$", re.MULTILINE | re.IGNORECASE), r"<h3>\1</h3>"),
    (re.compile(r"^## (.*)$", re.MULTILINE | re.IGNORECASE), r"<h2>\1</h2>"),
    (re.compile(r"^# (.*)$", re.MULTILINE | re.IGNORECASE), r"<h1>\1</h1>"),
    (re.compile(r"\*\*(.*?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.*?)\*"), r"<em>\1</em>"),
    (re.compile(r"`(.*?)`"), r"<code>\1</code>"),
]


@dataclass
class ChangelogDiff:
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.added or self.removed or self.changed)


def validate_changelog(md: str) -> str:
    if not md or not md.strip():
        raise ChangelogError("changelog must not be empty")
    if len(md) > MAX_CHANGELOG_LENGTH:
        raise ChangelogError(f"changelog is limited to {MAX_CHANGELOG_LENGTH} characters")
    return md


def markdown_to_html(md: str) -> str:
    """Preview conversion. Rules apply in order; newlines become <br>."""
    html = md
    for pattern, repl in _INLINE_RULES:
        html = pattern.sub(repl, html)
    return html.replace("\n", "<br>")


def _lines(md: str) -> list[str]:
    return [line for line in (md or "").split("\n") if line.strip()]


def diff_changelogs(old_md: str, new_md: str) -> ChangelogDiff:
    """
    Line-level comparison of two changelogs.

    A line of the old text counts as "changed" when a new line contains its
    first word but is not identical to it.
    """
    old_lines = _lines(old_md)
    new_lines = _lines(new_md)

    added = [line for line in new_lines if line not in old_lines]
    removed = [line for line in old_lines if line not in new_lines]

    changed = []
    for line in old_lines:
        head = line.split(" ")[0]
        similar = next((n for n in new_lines if head in n), None)
        if similar is not None and similar != line:
            changed.append(line)

    return ChangelogDiff(added=added, removed=removed, changed=changed)


def render_changelog(md: str) -> RenderableType:
    parts: list[Text] = []
    for line in (md or "").split("\n"):
        if line.startswith("##"):
            parts.append(Text(line.replace("##", "", 1).strip(), style="bold"))
        elif line.startswith("#"):
            parts.append(Text(line.replace("#", "", 1).strip(), style="bold underline"))
        elif line.startswith(("-", "*")):
            parts.append(Text("  • " + re.sub(r"^[-*]\s*", "", line)))
        elif line.strip():
            parts.append(Text(line))
        else:
            parts.append(Text(""))
    return Group(*parts)


def render_diff(diff: ChangelogDiff) -> RenderableType:
    parts: list[Text] = []
    for line in diff.added:
        parts.append(Text(f"+ {line}", style="green"))
    for line in diff.removed:
        parts.append(Text(f"- {line}", style="red"))
    for line in diff.changed:
        parts.append(Text(f"~ {line}", style="yellow"))
    if not parts:
        parts.append(Text("No differences.", style="dim"))
    return Group(*parts)
