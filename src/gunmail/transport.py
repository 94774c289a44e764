"""HTTP transport delivering mails to the Mailgun ``messages`` endpoint.

A :class:`~gunmail.mail.Mail` is posted as a form (``multipart/form-data``
when it carries attachments) with basic auth ``api:<api_key>``. Both a
blocking and an async variant are provided, each opening its own httpx
client per call. Fields go out in the order the builder added them.

Examples:
    Blocking send::

        transport = MailgunTransport()
        response = transport.send(mail)
        print(response.id)

    From a coroutine::

        response = await transport.send_async(mail)
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx

from gunmail.exceptions import MailConfigurationError, MailTransportError
from gunmail.form import Attachment
from gunmail.logging import TRACE_LEVEL

if TYPE_CHECKING:
    from collections.abc import Iterator

    from gunmail.form import FormValue
    from gunmail.mail import Mail

__all__ = ["MailResponse", "MailgunTransport"]

log = logging.getLogger(__name__)

API_USER = "api"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Status codes worth retrying later
_RETRYABLE_STATUS = frozenset({429})


@dataclass(frozen=True, slots=True)
class MailResponse:
    """Answer of the API to an accepted message.

    Attributes:
        status_code: HTTP status code.
        id: Message id assigned by Mailgun (``<...@domain>``).
        message: Human-readable status, e.g. ``Queued. Thank you.``.
    """

    status_code: int
    id: str
    message: str = ""


class MailgunTransport:
    """Send mails through the Mailgun HTTP API.

    Before posting, the configuration's default sender fills a missing
    ``from`` and its default parameters fill any parameter the mail does
    not set.

    Args:
        timeout: HTTP timeout in seconds. Defaults to the mail
            configuration's timeout.

    Raises:
        MailConfigurationError: If *timeout* is not positive.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        if timeout is not None and timeout <= 0:
            raise MailConfigurationError("Timeout must be greater than 0")
        self._timeout = timeout
        self._last_response: MailResponse | None = None

    @property
    def last_response(self) -> MailResponse | None:
        """Return the response from the last successful send."""
        return self._last_response

    def send(self, mail: Mail) -> MailResponse:
        """Post *mail* and wait for the answer.

        Args:
            mail: The mail to deliver.

        Returns:
            Parsed API response.

        Raises:
            MailConfigurationError: If the mail has no sender or recipient.
            MailTransportError: If the request fails or the API rejects it.
        """
        config = mail.configuration
        with contextlib.ExitStack() as stack:
            request = self._prepare_request(mail, stack)
            with self._request_errors(), httpx.Client(timeout=self._timeout or config.timeout) as client:
                response = client.post(config.messages_url, **request)

        return self._handle_response(response)

    async def send_async(self, mail: Mail) -> MailResponse:
        """Post *mail* from a coroutine.

        Same contract as :meth:`send`.
        """
        config = mail.configuration
        with contextlib.ExitStack() as stack:
            request = self._prepare_request(mail, stack)
            with self._request_errors():
                async with httpx.AsyncClient(timeout=self._timeout or config.timeout) as client:
                    response = await client.post(config.messages_url, **request)

        return self._handle_response(response)

    def _prepare_request(self, mail: Mail, stack: contextlib.ExitStack) -> dict[str, Any]:
        """Return the keyword arguments of the POST call.

        Fields are sent in builder call order: URL-encoded when the mail
        has no attachment, as multipart parts otherwise. Streams opened for
        path attachments are closed by *stack*.
        """
        fields = self._build_form(mail)
        self._trace_request(mail, fields)

        request: dict[str, Any] = {"auth": (API_USER, mail.configuration.api_key)}
        if any(isinstance(value, Attachment) for _, value in fields):
            request["files"] = self._multipart_parts(fields, stack)
        else:
            request["content"] = urlencode(fields)
            request["headers"] = {"Content-Type": FORM_CONTENT_TYPE}
        return request

    @staticmethod
    @contextlib.contextmanager
    def _request_errors() -> Iterator[None]:
        """Map httpx failures to :class:`MailTransportError`."""
        try:
            yield
        except httpx.TimeoutException as e:
            MailgunTransport._trace("[Mailgun] Timeout: %s", e)
            raise MailTransportError(f"Mailgun request timeout: {e}", retryable=True) from e
        except httpx.RequestError as e:
            MailgunTransport._trace("[Mailgun] RequestError: %s", e)
            raise MailTransportError(f"Mailgun request failed: {e}", retryable=True) from e

    def _build_form(self, mail: Mail) -> list[tuple[str, FormValue]]:
        """Merge the mail parameters with the configuration defaults.

        The default sender goes first, default parameters go last; the
        mail's own fields keep their order.

        Raises:
            MailConfigurationError: If there is no sender or no recipient.
        """
        config = mail.configuration
        fields = mail.items()
        own_names = {name for name, _ in fields}

        if "from" not in own_names:
            if not config.from_:
                raise MailConfigurationError("From address is required (set it on the mail or in the configuration)")
            fields.insert(0, ("from", config.from_))
            own_names.add("from")

        if "to" not in own_names:
            raise MailConfigurationError("To address is required")

        fields.extend((name, value) for name, value in config.default_parameters if name not in own_names)
        return fields

    @staticmethod
    def _multipart_parts(
        fields: list[tuple[str, FormValue]],
        stack: contextlib.ExitStack,
    ) -> list[tuple[str, Any]]:
        """Return httpx parts for every field, registering opened paths on *stack*."""
        parts: list[tuple[str, Any]] = []
        for name, value in fields:
            if not isinstance(value, Attachment):
                parts.append((name, (None, value)))
                continue
            try:
                filename, content, content_type = value.open()
            except OSError as e:
                raise MailTransportError(f"Cannot read attachment {value.content}: {e}") from e
            if isinstance(value.content, Path):
                stack.callback(content.close)
            parts.append((name, (filename, content, content_type)))
        return parts

    def _handle_response(self, response: httpx.Response) -> MailResponse:
        """Turn an HTTP response into a :class:`MailResponse` or an error."""
        status = response.status_code
        payload = self._json_payload(response)

        if not 200 <= status < 300:
            error_msg = payload.get("message") if payload else None
            if not error_msg:
                error_msg = response.text or f"HTTP {status}"
            self._trace("[Mailgun] Error %d: %s", status, error_msg)
            raise MailTransportError(
                f"Mailgun API error ({status}): {error_msg}",
                status_code=status,
                response_body=response.text,
                retryable=status in _RETRYABLE_STATUS or status >= 500,
            )

        result = MailResponse(
            status_code=status,
            id=str(payload.get("id", "")),
            message=str(payload.get("message", "")),
        )
        self._last_response = result
        log.debug("Email sent via Mailgun: %s", result.id)
        return result

    @staticmethod
    def _json_payload(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    def _trace_request(self, mail: Mail, fields: list[tuple[str, FormValue]]) -> None:
        if not log.isEnabledFor(TRACE_LEVEL):
            return
        attachments = sum(1 for _, value in fields if isinstance(value, Attachment))
        recipients = [value for name, value in fields if name == "to"]
        sender = next((value for name, value in fields if name == "from"), None)
        log.log(TRACE_LEVEL, "[Mailgun] POST %s", mail.configuration.messages_url)
        log.log(TRACE_LEVEL, "[Mailgun] From: %s, To: %s", sender, recipients)
        log.log(TRACE_LEVEL, "[Mailgun] Fields: %s, attachments: %d", [name for name, _ in fields], attachments)

    @staticmethod
    def _trace(msg: str, *args: Any) -> None:
        if log.isEnabledFor(TRACE_LEVEL):
            log.log(TRACE_LEVEL, msg, *args)
