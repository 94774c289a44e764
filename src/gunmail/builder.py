"""Fluent builder assembling the parameters of a Mailgun message.

Examples:
    >>> from gunmail import Configuration, MailBuilder
    >>> config = Configuration(domain="mg.example.com", api_key="key-123")
    >>> mail = (
    ...     MailBuilder.using(config)
    ...     .from_("Emmet Brown", "doc@delorean.com")
    ...     .to("marty@mcfly.com")
    ...     .subject("Great Scott!")
    ...     .text("Meet me at the clock tower.")
    ...     .build()
    ... )
    >>> mail.get("from")
    'Emmet Brown <doc@delorean.com>'
"""

from __future__ import annotations

import logging
from datetime import datetime
from email.utils import format_datetime
from typing import TYPE_CHECKING, Any

from gunmail.config import format_address
from gunmail.exceptions import MailParameterError
from gunmail.form import FormAccumulator
from gunmail.mail import Mail
from gunmail.multipart import MultipartBuilder

if TYPE_CHECKING:
    from gunmail.config import Configuration
    from gunmail.content import MailContent
    from gunmail.form import FormValue

log = logging.getLogger(__name__)

# Default of the optional address argument; an explicit None is rejected
_NO_ADDRESS: Any = object()

#: Parameters the API honours once; repeating them is logged.
SINGLE_VALUED_PARAMETERS = frozenset(
    {
        "from",
        "subject",
        "text",
        "html",
        "h:Reply-To",
        "template",
        "o:deliverytime",
        "o:testmode",
        "o:tracking",
    }
)


def _yes_no(enabled: bool) -> str:
    return "yes" if enabled else "no"


class MailBuilder:
    """Mutable builder for a :class:`~gunmail.mail.Mail`.

    Parts can be added in any order; every method returns the builder so
    calls can be chained. Recipient methods accept either a single
    address (``"doc@delorean.com"`` or ``"Emmet Brown <doc@delorean.com>"``)
    or a name followed by an address.

    Addresses are passed through as given: no syntax check, no
    deduplication.

    Args:
        configuration: Settings shared with the transport. Never modified.

    Examples:
        >>> builder = MailBuilder(config)  # doctest: +SKIP
        >>> builder.to("a@example.com").to("b@example.com")  # doctest: +SKIP
    """

    def __init__(self, configuration: Configuration) -> None:
        self._configuration = configuration
        self._form = FormAccumulator()

    @classmethod
    def using(cls, configuration: Configuration) -> MailBuilder:
        """Return a new builder bound to *configuration*."""
        return cls(configuration)

    @property
    def configuration(self) -> Configuration:
        """Return the configuration used by this builder."""
        return self._configuration

    def from_(self, name_or_address: str, address: str = _NO_ADDRESS) -> MailBuilder:
        """Set the sender.

        A default sender can be set once in the configuration instead.

        Args:
            name_or_address: Sender address, or sender name when
                *address* is given.
            address: Sender address when a name is given first.

        Returns:
            This builder.
        """
        return self._address_param("from", name_or_address, address)

    def to(self, name_or_address: str, address: str = _NO_ADDRESS) -> MailBuilder:
        """Add a recipient."""
        return self._address_param("to", name_or_address, address)

    def cc(self, name_or_address: str, address: str = _NO_ADDRESS) -> MailBuilder:
        """Add a carbon-copy recipient."""
        return self._address_param("cc", name_or_address, address)

    def bcc(self, name_or_address: str, address: str = _NO_ADDRESS) -> MailBuilder:
        """Add a blind carbon-copy recipient."""
        return self._address_param("bcc", name_or_address, address)

    def reply_to(self, address: str) -> MailBuilder:
        """Set the ``Reply-To`` header (sent as the ``h:Reply-To`` parameter)."""
        return self._param("h:Reply-To", address)

    def subject(self, subject: str) -> MailBuilder:
        """Set the subject."""
        return self._param("subject", subject)

    def text(self, text: str) -> MailBuilder:
        """Set the plain-text body."""
        return self._param("text", text)

    def html(self, html: str) -> MailBuilder:
        """Set the HTML body."""
        return self._param("html", html)

    def content(self, content: MailContent) -> MailBuilder:
        """Set both bodies from a content provider, text first, then HTML."""
        if content is None:
            raise MailParameterError("content", "content must not be None")
        return self.text(content.text()).html(content.html())

    def parameter(self, name: str, value: str) -> MailBuilder:
        """Add an arbitrary API parameter."""
        return self._param(name, value)

    def header(self, name: str, value: str) -> MailBuilder:
        """Add a custom MIME header (``h:<name>``)."""
        if name is None:
            raise MailParameterError(name, "header name must not be None")
        return self._param(f"h:{name}", value)

    def variable(self, name: str, value: str) -> MailBuilder:
        """Attach custom data (``v:<name>``) returned in webhooks and events."""
        if name is None:
            raise MailParameterError(name, "variable name must not be None")
        return self._param(f"v:{name}", value)

    def tag(self, tag: str) -> MailBuilder:
        """Add a tag (``o:tag``). Can be called several times."""
        return self._param("o:tag", tag)

    def test_mode(self, enabled: bool = True) -> MailBuilder:
        """Ask the API to accept the message without delivering it."""
        return self._param("o:testmode", _yes_no(enabled))

    def tracking(self, enabled: bool = True) -> MailBuilder:
        """Toggle open and click tracking for this message."""
        return self._param("o:tracking", _yes_no(enabled))

    def delivery_time(self, when: datetime) -> MailBuilder:
        """Schedule delivery (``o:deliverytime``, RFC 2822 date).

        Args:
            when: Timezone-aware delivery date.

        Raises:
            MailParameterError: If *when* is ``None`` or naive.
        """
        if when is None:
            raise MailParameterError("o:deliverytime", "value must not be None")
        if when.tzinfo is None:
            raise MailParameterError("o:deliverytime", "datetime must be timezone-aware")
        return self._param("o:deliverytime", format_datetime(when))

    def template(self, name: str) -> MailBuilder:
        """Render the message from a template stored on the server."""
        return self._param("template", name)

    def multipart(self) -> MultipartBuilder:
        """Open a scope for adding attachments.

        Returns:
            Builder writing into this builder's parameters; go back with
            :meth:`MultipartBuilder.mail_builder`.
        """
        return MultipartBuilder(self)

    def build(self) -> Mail:
        """Freeze the parameters into a :class:`Mail`.

        The builder should not be used after this call.
        """
        fields = self._form.snapshot()
        log.debug("Built mail with %d parameters (%s)", len(fields), ", ".join(self._form.names()))
        return Mail(self._configuration, fields)

    def _address_param(self, name: str, name_or_address: str, address: str) -> MailBuilder:
        if address is _NO_ADDRESS:
            return self._param(name, name_or_address)
        if name_or_address is None:
            raise MailParameterError(name, "display name must not be None")
        if address is None:
            raise MailParameterError(name, "address must not be None")
        return self._param(name, format_address(name_or_address, address))

    def _param(self, name: str, value: FormValue) -> MailBuilder:
        repeated = name in SINGLE_VALUED_PARAMETERS and name in self._form
        self._form.append(name, value)
        if repeated:
            log.warning("Parameter '%s' set more than once, the API may keep only one value", name)
        return self

    def __repr__(self) -> str:
        return f"MailBuilder(domain={self._configuration.domain!r}, fields={len(self._form)})"


__all__ = ["SINGLE_VALUED_PARAMETERS", "MailBuilder"]
