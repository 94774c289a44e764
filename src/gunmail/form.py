"""Ordered, multi-valued form parameters.

A mail is a list of ``(name, value)`` pairs where names may repeat
(several ``to`` entries, several attachments). Order of insertion is kept
so the outbound request reproduces the order of the builder calls.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Union

from gunmail.exceptions import MailParameterError

if TYPE_CHECKING:
    from collections.abc import Iterator

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class Attachment:
    """A file carried by a multipart mail.

    Attributes:
        content: Raw bytes, an open binary stream, or a path read at
            delivery time.
        filename: Name presented to the recipient.
        content_type: MIME type; ``None`` lets the HTTP client decide.

    Examples:
        >>> Attachment(b"a,b\\n", filename="report.csv", content_type="text/csv").filename
        'report.csv'
    """

    content: bytes | BinaryIO | Path
    filename: str | None = None
    content_type: str | None = None

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> Attachment:
        """Describe a file on disk without reading it.

        Args:
            path: File location.
            filename: Override for the presented name (defaults to the
                file name).
            content_type: Override for the MIME type (guessed from the
                extension, ``application/octet-stream`` when unknown).

        Returns:
            Attachment pointing at *path*.
        """
        path = Path(path)
        if content_type is None:
            guessed, _ = mimetypes.guess_type(path.name)
            content_type = guessed or DEFAULT_CONTENT_TYPE
        return cls(content=path, filename=filename or path.name, content_type=content_type)

    def open(self) -> tuple[str | None, bytes | BinaryIO, str | None]:
        """Return the ``(filename, content, content_type)`` tuple httpx expects.

        Paths are opened here; the caller owns the returned stream and
        must close it. Seekable caller streams are rewound so the same
        mail can be sent more than once; other streams are read only once.
        """
        content: bytes | BinaryIO
        if isinstance(self.content, Path):
            content = self.content.open("rb")
        else:
            content = self.content
            if not isinstance(content, bytes) and content.seekable():
                content.seek(0)
        return self.filename, content, self.content_type


FormValue = Union[str, Attachment]


@dataclass(frozen=True, slots=True)
class FormField:
    """One ``name=value`` pair of the form."""

    name: str
    value: FormValue

    @property
    def is_file(self) -> bool:
        """Return True when the value is an attachment."""
        return isinstance(self.value, Attachment)


class FormAccumulator:
    """Append-only list of form fields.

    Appending a name that already exists adds a second field instead of
    replacing the first one.

    Examples:
        >>> form = FormAccumulator()
        >>> form.append("to", "a@example.com")
        >>> form.append("to", "b@example.com")
        >>> form.get_all("to")
        ['a@example.com', 'b@example.com']
    """

    __slots__ = ("_fields",)

    def __init__(self) -> None:
        self._fields: list[FormField] = []

    def append(self, name: str, value: FormValue) -> None:
        """Add one field after the existing ones.

        Args:
            name: Parameter name.
            value: Parameter value.

        Raises:
            MailParameterError: If *name* or *value* is ``None``.
        """
        if name is None:
            raise MailParameterError(name, "name must not be None")
        if value is None:
            raise MailParameterError(name, "value must not be None")
        self._fields.append(FormField(name, value))

    def get_all(self, name: str) -> list[FormValue]:
        """Return every value recorded under *name*, in order."""
        return [field.value for field in self._fields if field.name == name]

    def names(self) -> list[str]:
        """Return the distinct names in order of first appearance."""
        return list(dict.fromkeys(field.name for field in self._fields))

    def snapshot(self) -> tuple[FormField, ...]:
        """Return an immutable copy of the current fields."""
        return tuple(self._fields)

    def __contains__(self, name: object) -> bool:
        return any(field.name == name for field in self._fields)

    def __iter__(self) -> Iterator[FormField]:
        return iter(tuple(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FormAccumulator({len(self._fields)} fields)"


__all__ = ["DEFAULT_CONTENT_TYPE", "Attachment", "FormAccumulator", "FormField", "FormValue"]
