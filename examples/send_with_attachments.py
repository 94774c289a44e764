#!/usr/bin/env python3
"""Send a mail with an attachment and an inline image through Mailgun.

Setup:
    export MAILGUN_DOMAIN="mg.example.com"
    export MAILGUN_API_KEY="key-..."
    export MAILGUN_TEST_EMAIL="you@example.com"

Usage:
    python examples/send_with_attachments.py

The mail is sent in test mode: Mailgun accepts it without delivering it.
"""

from __future__ import annotations

import asyncio
import os
import sys
from base64 import b64decode
from pathlib import Path
from tempfile import TemporaryDirectory

from gunmail import Configuration, MailBuilder, MailTransportError
from gunmail.logging import init_logging

_LOGO_BASE64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAusB9Y9dOAoAAAAASUVORK5CYII="


async def main() -> int:
    """Build and send the mail, return a process exit code."""
    init_logging("TRACE")

    recipient = os.getenv("MAILGUN_TEST_EMAIL")
    if not recipient:
        print("ERROR: set MAILGUN_TEST_EMAIL to your own address")
        return 1

    config = Configuration.from_mapping(
        {
            "domain": "${MAILGUN_DOMAIN}",
            "api_key": "${MAILGUN_API_KEY}",
            "region": "${MAILGUN_REGION:-us}",
            "from": {"name": "gunmail", "address": "postmaster@${MAILGUN_DOMAIN}"},
        }
    )

    with TemporaryDirectory() as tmp_dir:
        report_path = Path(tmp_dir) / "daily-report.txt"
        report_path.write_text("Daily metrics: 42 conversions", encoding="utf-8")

        mail = (
            MailBuilder.using(config)
            .to(recipient)
            .subject("Daily metrics report")
            .text("Please find the report attached.")
            .html('<p>Please find the report attached.</p><img src="cid:logo.png" alt="logo" />')
            .test_mode()
            .multipart()
            .attachment(report_path)
            .inline(b64decode(_LOGO_BASE64), "logo.png", "image/png")
            .build()
        )

        try:
            response = await mail.send_async()
        except MailTransportError as e:
            print(f"Send failed: {e} (retryable={e.retryable})")
            return 1

    print(f"{response.message} {response.id}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual example
    sys.exit(asyncio.run(main()))
