"""
Custom tag capability.

Custom tags are stored in insertion-ordered, name-keyed dicts on playlists
and segments; setting a tag whose name is already present replaces it in
place (last write wins, insertion position kept).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class CustomTag(Protocol):
    """Anything the encoder can render as a custom tag line."""

    def tag_name(self) -> str:
        """Stable tag name, used as the replacement key (e.g. "#X-MY-TAG")."""
        ...

    def render(self) -> str | None:
        """Tag text without the trailing newline, or None to omit the tag."""
        ...


@dataclass
class SimpleTag:
    """A custom tag rendered as ``<name>:<value>`` or just ``<name>``.

    Attributes:
        name: Tag name including the leading '#', e.g. "#X-CUSTOM".
        value: Tag value; empty renders the bare name.
        enabled: When False the tag is kept but omitted from output.
    """

    name: str
    value: str = ""
    enabled: bool = True

    def tag_name(self) -> str:
        return self.name

    def render(self) -> str | None:
        if not self.enabled:
            return None
        if self.value:
            return f"{self.name}:{self.value}"
        return self.name
