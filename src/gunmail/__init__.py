"""Fluent builder for Mailgun messages.

Build a mail from a shared configuration, then hand it to the HTTP
transport.

Examples:
    >>> from gunmail import Configuration, MailBuilder
    >>> config = Configuration(domain="mg.example.com", api_key="key-123", from_="noreply@example.com")
    >>> mail = MailBuilder.using(config).to("marty@mcfly.com").subject("Hi").text("Hello").build()
    >>> response = mail.send()  # doctest: +SKIP
"""

from gunmail.builder import MailBuilder
from gunmail.config import Configuration
from gunmail.content import MailContent, StaticContent
from gunmail.exceptions import (
    GunmailError,
    MailConfigurationError,
    MailParameterError,
    MailTransportError,
)
from gunmail.form import Attachment, FormAccumulator, FormField
from gunmail.mail import Mail
from gunmail.multipart import MultipartBuilder
from gunmail.transport import MailgunTransport, MailResponse

__version__ = "0.1.0"

__all__ = [
    "Attachment",
    "Configuration",
    "FormAccumulator",
    "FormField",
    "GunmailError",
    "Mail",
    "MailBuilder",
    "MailConfigurationError",
    "MailContent",
    "MailParameterError",
    "MailResponse",
    "MailTransportError",
    "MailgunTransport",
    "MultipartBuilder",
    "StaticContent",
    "__version__",
]
