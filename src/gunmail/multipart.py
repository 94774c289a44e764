"""Attachment scope of a mail builder."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from gunmail.exceptions import MailParameterError
from gunmail.form import Attachment

if TYPE_CHECKING:
    from gunmail.builder import MailBuilder
    from gunmail.mail import Mail


class MultipartBuilder:
    """Add attachments to the mail of a parent :class:`MailBuilder`.

    Entries are written into the parent's parameters, in call order with
    everything else. Use :meth:`mail_builder` to resume chaining on the
    parent.

    Examples:
        >>> mail = (
        ...     MailBuilder.using(config)  # doctest: +SKIP
        ...     .to("marty@mcfly.com")
        ...     .multipart()
        ...     .attachment(Path("plans.pdf"))
        ...     .mail_builder()
        ...     .subject("Plans")
        ...     .build()
        ... )
    """

    def __init__(self, mail_builder: MailBuilder) -> None:
        if mail_builder is None:
            raise MailParameterError(None, "multipart scope needs a parent builder")
        self._mail_builder = mail_builder

    def attachment(
        self,
        content: bytes | BinaryIO | str | Path,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> MultipartBuilder:
        """Add a file attachment.

        Args:
            content: File path (``str`` or ``Path``), raw bytes, or an open
                binary stream.
            filename: Name shown to the recipient. Defaults to the file
                name for paths.
            content_type: MIME type. Guessed from the file name for paths.

        Returns:
            This multipart builder.

        Raises:
            MailParameterError: If *content* is ``None``.
        """
        return self._file_param("attachment", content, filename, content_type)

    def inline(
        self,
        content: bytes | BinaryIO | str | Path,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> MultipartBuilder:
        """Add an inline file, referenced from the HTML body as ``cid:<filename>``."""
        return self._file_param("inline", content, filename, content_type)

    def mail_builder(self) -> MailBuilder:
        """Return the parent builder."""
        return self._mail_builder

    def build(self) -> Mail:
        """Shortcut for ``mail_builder().build()``."""
        return self._mail_builder.build()

    def _file_param(
        self,
        name: str,
        content: bytes | BinaryIO | str | Path,
        filename: str | None,
        content_type: str | None,
    ) -> MultipartBuilder:
        if content is None:
            raise MailParameterError(name, "content must not be None")
        if isinstance(content, (str, Path)):
            attachment = Attachment.from_path(content, filename=filename, content_type=content_type)
        else:
            attachment = Attachment(content=content, filename=filename, content_type=content_type)
        self._mail_builder._param(name, attachment)  # pylint: disable=protected-access
        return self

    def __repr__(self) -> str:
        return f"MultipartBuilder(parent={self._mail_builder!r})"


__all__ = ["MultipartBuilder"]
