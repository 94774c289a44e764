"""Plain-text mail composition using :class:`gunmail.MailBuilder`."""

from __future__ import annotations

from gunmail import Configuration, MailBuilder


def build_plain_mail() -> None:
    """Construct a plain-text mail and print its form fields."""
    config = Configuration(
        domain="mg.example.com",
        api_key="key-not-a-real-key",
        from_="Example <noreply@example.com>",
    )

    mail = (
        MailBuilder.using(config)
        .to("Marty McFly", "marty@mcfly.com")
        .cc("doc@delorean.com")
        .subject("Plain Greetings")
        .text("Hello from gunmail!\nThis mail only has a plain-text body.")
        .tag("examples")
        .build()
    )

    print(f"POST {config.messages_url}")
    for name, value in mail.items():
        print(f"  {name} = {value!r}")


if __name__ == "__main__":  # pragma: no cover - manual example
    build_plain_mail()
