"""Mail body content providers.

``MailBuilder.content()`` accepts anything able to render both a plain-text
and an HTML version of the body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class MailContent(Protocol):
    """Protocol for objects providing a text/HTML body pair.

    Examples:
        >>> isinstance(StaticContent("Hi", "<p>Hi</p>"), MailContent)
        True
    """

    def text(self) -> str:
        """Return the plain-text body."""
        ...

    def html(self) -> str:
        """Return the HTML body."""
        ...


@dataclass(frozen=True, slots=True)
class StaticContent:
    """Pre-rendered body pair."""

    text_body: str
    html_body: str

    def text(self) -> str:
        return self.text_body

    def html(self) -> str:
        return self.html_body


__all__ = ["MailContent", "StaticContent"]
