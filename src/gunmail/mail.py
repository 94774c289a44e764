"""Immutable mail produced by :class:`gunmail.builder.MailBuilder`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from gunmail.form import Attachment, FormField

if TYPE_CHECKING:
    from gunmail.config import Configuration
    from gunmail.form import FormValue
    from gunmail.transport import MailgunTransport, MailResponse


@dataclass(frozen=True, slots=True)
class Mail:
    """A finished message, ready for delivery.

    Attributes:
        configuration: Settings the mail was built with.
        parameters: Form fields in the order they were added.

    Examples:
        >>> mail = MailBuilder.using(config).to("a@example.com").build()  # doctest: +SKIP
        >>> mail.get_all("to")  # doctest: +SKIP
        ['a@example.com']
    """

    configuration: Configuration
    parameters: tuple[FormField, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))

    @property
    def is_multipart(self) -> bool:
        """Return True when the mail carries attachments."""
        return any(field.is_file for field in self.parameters)

    def get(self, name: str) -> FormValue | None:
        """Return the first value of *name*, or ``None``."""
        for field in self.parameters:
            if field.name == name:
                return field.value
        return None

    def get_all(self, name: str) -> list[FormValue]:
        """Return every value of *name*, in order."""
        return [field.value for field in self.parameters if field.name == name]

    def items(self) -> list[tuple[str, FormValue]]:
        """Return the ``(name, value)`` pairs, in order."""
        return [(field.name, field.value) for field in self.parameters]

    def form_data(self) -> dict[str, list[str]]:
        """Return the text fields grouped by name.

        Names keep the order of their first appearance and values keep
        their own order. Interleaving across names is lost; the transport
        sends :meth:`items` instead.
        """
        data: dict[str, list[str]] = {}
        for field in self.parameters:
            if not field.is_file:
                data.setdefault(field.name, []).append(str(field.value))
        return data

    def files(self) -> list[tuple[str, Attachment]]:
        """Return the attachment fields, in order."""
        return [(field.name, field.value) for field in self.parameters if isinstance(field.value, Attachment)]

    def send(self, transport: MailgunTransport | None = None) -> MailResponse:
        """Deliver the mail, blocking until the API answers.

        Args:
            transport: Transport to use; a default :class:`MailgunTransport`
                otherwise.

        Raises:
            MailConfigurationError: If no sender is available.
            MailTransportError: If the request fails.
        """
        return self._transport(transport).send(self)

    async def send_async(self, transport: MailgunTransport | None = None) -> MailResponse:
        """Deliver the mail without blocking the event loop."""
        return await self._transport(transport).send_async(self)

    @staticmethod
    def _transport(transport: MailgunTransport | None) -> MailgunTransport:
        if transport is not None:
            return transport
        from gunmail.transport import MailgunTransport

        return MailgunTransport()

    def __contains__(self, name: object) -> bool:
        return any(field.name == name for field in self.parameters)

    def __len__(self) -> int:
        return len(self.parameters)


__all__ = ["Mail"]
