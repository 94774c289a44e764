"""Command line interface for sending mails.

Examples:
    # Plain text mail, sender taken from the configuration
    gunmail send -c mailgun.yml --to marty@mcfly.com --subject "Hi" --text "Hello"

    # HTML body from a file, with attachments, in test mode
    gunmail send -c mailgun.yml --to marty@mcfly.com --html-file body.html \\
        --attach plans.pdf --test-mode

    # Show the resolved configuration
    gunmail config -c mailgun.yml
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from gunmail.builder import MailBuilder
from gunmail.config import Configuration
from gunmail.exceptions import GunmailError, MailConfigurationError
from gunmail.logging import init_logging

app = typer.Typer(help="Send mails through the Mailgun HTTP API.", no_args_is_help=True)
console = Console()

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        envvar="GUNMAIL_CONFIG",
        help="YAML configuration file (or GUNMAIL_CONFIG).",
    ),
]


def _load_configuration(path: Path) -> Configuration:
    try:
        return Configuration.from_file(path)
    except MailConfigurationError as e:
        console.print(f"[red]Failed to load configuration: {e}[/]")
        raise typer.Exit(code=1) from e


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="Log level (TRACE, DEBUG, INFO, WARNING...)."),
    ] = "WARNING",
) -> None:
    """Send mails through the Mailgun HTTP API."""
    try:
        init_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e


@app.command()
def send(
    config_path: ConfigOption,
    to: Annotated[list[str], typer.Option("--to", "-t", help="Recipient, repeatable.")],
    sender: Annotated[
        str | None,
        typer.Option("--from", "-f", help="Sender (defaults to the configuration)."),
    ] = None,
    cc: Annotated[list[str] | None, typer.Option("--cc", help="CC recipient, repeatable.")] = None,
    bcc: Annotated[list[str] | None, typer.Option("--bcc", help="BCC recipient, repeatable.")] = None,
    subject: Annotated[str | None, typer.Option("--subject", "-s", help="Subject line.")] = None,
    text: Annotated[str | None, typer.Option("--text", help="Plain-text body.")] = None,
    html_file: Annotated[
        Path | None,
        typer.Option("--html-file", exists=True, dir_okay=False, help="File holding the HTML body."),
    ] = None,
    attach: Annotated[
        list[Path] | None,
        typer.Option("--attach", "-a", exists=True, dir_okay=False, help="File to attach, repeatable."),
    ] = None,
    tag: Annotated[list[str] | None, typer.Option("--tag", help="Tag, repeatable.")] = None,
    test_mode: Annotated[
        bool,
        typer.Option("--test-mode", help="Let the API accept the mail without delivering it."),
    ] = False,
) -> None:
    """Build a mail from the options and send it."""
    if text is None and html_file is None:
        console.print("[red]Provide a body with --text or --html-file.[/]")
        raise typer.Exit(code=1)

    builder = MailBuilder.using(_load_configuration(config_path))
    if sender:
        builder.from_(sender)
    for address in to:
        builder.to(address)
    for address in cc or []:
        builder.cc(address)
    for address in bcc or []:
        builder.bcc(address)
    if subject is not None:
        builder.subject(subject)
    if text is not None:
        builder.text(text)
    if html_file is not None:
        builder.html(html_file.read_text(encoding="utf-8"))
    for value in tag or []:
        builder.tag(value)
    if test_mode:
        builder.test_mode()
    if attach:
        multipart = builder.multipart()
        for path in attach:
            multipart.attachment(path)

    try:
        response = builder.build().send()
    except GunmailError as e:
        console.print(f"[red]Send failed: {e}[/]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]{response.message or 'Accepted'}[/]")
    console.print(f"[dim]Message id: {response.id}[/]")


@app.command("config")
def show_config(config_path: ConfigOption) -> None:
    """Show the resolved configuration (API key masked)."""
    config = _load_configuration(config_path)

    table = Table(title="Mailgun configuration", show_lines=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("domain", config.domain)
    table.add_row("api_key", config.masked_api_key)
    table.add_row("from", config.from_ or "[dim]-[/]")
    table.add_row("messages_url", config.messages_url)
    table.add_row("timeout", f"{config.timeout:g}s")
    for name, value in config.default_parameters:
        table.add_row(f"default {name}", value)

    console.print(table)


__all__ = ["app"]
