"""Tests for the mail builder fluent API."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from gunmail import Configuration, MailBuilder, MailParameterError, StaticContent
from gunmail.mail import Mail


class RecordingContent:
    """Content double counting how often each body is rendered."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def text(self) -> str:
        """Return the plain-text body."""
        self.calls.append("text")
        return "T"

    def html(self) -> str:
        """Return the HTML body."""
        self.calls.append("html")
        return "<p>T</p>"


class TestMailBuilderConstruction:
    """Tests for builder creation."""

    def test_constructor_and_factory(self, config: Configuration) -> None:
        """Both creation paths bind the configuration."""
        assert MailBuilder(config).configuration is config
        assert MailBuilder.using(config).configuration is config

    def test_chaining_returns_same_builder(self, builder: MailBuilder) -> None:
        """Every named operation returns the builder itself."""
        assert builder.from_("a@example.com") is builder
        assert builder.to("b@example.com") is builder
        assert builder.cc("c@example.com") is builder
        assert builder.bcc("d@example.com") is builder
        assert builder.reply_to("e@example.com") is builder
        assert builder.subject("S") is builder
        assert builder.text("T") is builder
        assert builder.html("<p>T</p>") is builder
        assert builder.parameter("o:dkim", "yes") is builder
        assert builder.header("X-Campaign", "spring") is builder
        assert builder.variable("user_id", "42") is builder
        assert builder.tag("welcome") is builder
        assert builder.test_mode() is builder
        assert builder.tracking(False) is builder
        assert builder.template("welcome-v2") is builder


class TestMailBuilderParameters:
    """Behavioural coverage for named operations."""

    def test_build_preserves_call_order(self, builder: MailBuilder) -> None:
        """Built parameters follow the call order."""
        mail = (
            builder.subject("Hello")
            .to("a@example.com")
            .from_("sender@example.com")
            .text("Body")
            .cc("c@example.com")
            .build()
        )

        assert mail.items() == [
            ("subject", "Hello"),
            ("to", "a@example.com"),
            ("from", "sender@example.com"),
            ("text", "Body"),
            ("cc", "c@example.com"),
        ]

    def test_repeated_recipients_are_kept(self, builder: MailBuilder) -> None:
        """Two ``to`` calls yield two ``to`` pairs."""
        mail = builder.to("a@x.com").to("b@x.com").build()
        assert mail.get_all("to") == ["a@x.com", "b@x.com"]

    def test_from_with_name(self, builder: MailBuilder) -> None:
        """The two-argument form renders ``name <address>``."""
        mail = builder.from_("Name", "e@x.com").build()
        assert mail.get_all("from") == ["Name <e@x.com>"]

    @pytest.mark.parametrize("method", ["to", "cc", "bcc"])
    def test_recipients_with_name(self, builder: MailBuilder, method: str) -> None:
        """Recipient methods share the ``name <address>`` convention."""
        getattr(builder, method)("Marty McFly", "marty@mcfly.com")
        assert builder.build().get_all(method) == ["Marty McFly <marty@mcfly.com>"]

    def test_full_address_passes_through(self, builder: MailBuilder) -> None:
        """A preformatted address is appended unchanged."""
        mail = builder.to("Emmet Brown <doc@delorean.com>").build()
        assert mail.get("to") == "Emmet Brown <doc@delorean.com>"

    def test_addresses_are_not_validated(self, builder: MailBuilder) -> None:
        """No syntax check and no deduplication happen here."""
        mail = builder.to("not-an-address").to("not-an-address").build()
        assert mail.get_all("to") == ["not-an-address", "not-an-address"]

    def test_reply_to_uses_header_parameter(self, builder: MailBuilder) -> None:
        """Reply-To goes through the ``h:`` header convention."""
        mail = builder.reply_to("reply@example.com").build()
        assert mail.get("h:Reply-To") == "reply@example.com"

    def test_subject_and_bodies(self, builder: MailBuilder) -> None:
        """Subject, text and html map to their own parameters."""
        mail = builder.subject("S").text("T").html("<p>T</p>").build()
        assert mail.get("subject") == "S"
        assert mail.get("text") == "T"
        assert mail.get("html") == "<p>T</p>"

    def test_content_appends_text_then_html(self, builder: MailBuilder) -> None:
        """``content()`` equals ``text()`` followed by ``html()``."""
        content = RecordingContent()
        mail = builder.content(content).build()

        assert mail.items() == [("text", "T"), ("html", "<p>T</p>")]
        assert content.calls == ["text", "html"]

    def test_static_content(self, builder: MailBuilder) -> None:
        """The bundled content implementation works with the builder."""
        mail = builder.content(StaticContent("Hi", "<b>Hi</b>")).build()
        assert mail.get("text") == "Hi"
        assert mail.get("html") == "<b>Hi</b>"

    def test_custom_parameter(self, builder: MailBuilder) -> None:
        """Arbitrary parameters are appended as given."""
        mail = builder.parameter("o:dkim", "yes").build()
        assert mail.get("o:dkim") == "yes"

    def test_header_and_variable_prefixes(self, builder: MailBuilder) -> None:
        """Headers use ``h:`` and custom data uses ``v:``."""
        mail = builder.header("X-Campaign", "spring").variable("user_id", "42").build()
        assert mail.get("h:X-Campaign") == "spring"
        assert mail.get("v:user_id") == "42"

    def test_options(self, builder: MailBuilder) -> None:
        """Tags, test mode and tracking map to ``o:`` options."""
        mail = builder.tag("a").tag("b").test_mode().tracking(False).template("welcome").build()
        assert mail.get_all("o:tag") == ["a", "b"]
        assert mail.get("o:testmode") == "yes"
        assert mail.get("o:tracking") == "no"
        assert mail.get("template") == "welcome"

    def test_delivery_time_rfc2822(self, builder: MailBuilder) -> None:
        """Delivery time is rendered as an RFC 2822 date."""
        when = datetime(2026, 10, 21, 16, 29, 0, tzinfo=timezone(timedelta(hours=-7)))
        mail = builder.delivery_time(when).build()
        assert mail.get("o:deliverytime") == "Wed, 21 Oct 2026 16:29:00 -0700"

    def test_delivery_time_requires_timezone(self, builder: MailBuilder) -> None:
        """Naive datetimes are rejected."""
        with pytest.raises(MailParameterError, match="timezone-aware"):
            builder.delivery_time(datetime(2026, 10, 21, 16, 29))


class TestMailBuilderErrors:
    """Tests for None handling."""

    @pytest.mark.parametrize(
        ("name", "value"),
        [(None, "v"), ("k", None)],
    )
    def test_parameter_none_rejected(self, builder: MailBuilder, name: str, value: str) -> None:
        """None names or values raise and leave the builder untouched."""
        builder.to("a@example.com")

        with pytest.raises(MailParameterError):
            builder.parameter(name, value)

        assert builder.build().items() == [("to", "a@example.com")]

    @pytest.mark.parametrize("method", ["from_", "to", "cc", "bcc", "reply_to", "subject", "text", "html", "tag"])
    def test_named_operations_reject_none(self, builder: MailBuilder, method: str) -> None:
        """Named operations reject None values."""
        with pytest.raises(MailParameterError):
            getattr(builder, method)(None)
        assert len(builder.build()) == 0

    def test_two_argument_form_rejects_none_name(self, builder: MailBuilder) -> None:
        """A None display name is rejected."""
        with pytest.raises(MailParameterError):
            builder.to(None, "a@example.com")  # type: ignore[arg-type]
        assert len(builder.build()) == 0

    @pytest.mark.parametrize("method", ["from_", "to", "cc", "bcc"])
    def test_two_argument_form_rejects_none_address(self, builder: MailBuilder, method: str) -> None:
        """A display name followed by a None address is rejected."""
        with pytest.raises(MailParameterError, match="address must not be None"):
            getattr(builder, method)("Marty McFly", None)
        assert len(builder.build()) == 0

    def test_header_rejects_none_name(self, builder: MailBuilder) -> None:
        """Header and variable names cannot be None."""
        with pytest.raises(MailParameterError):
            builder.header(None, "v")  # type: ignore[arg-type]
        with pytest.raises(MailParameterError):
            builder.variable(None, "v")  # type: ignore[arg-type]

    def test_content_rejects_none(self, builder: MailBuilder) -> None:
        """``content(None)`` is rejected."""
        with pytest.raises(MailParameterError):
            builder.content(None)  # type: ignore[arg-type]

    def test_error_is_value_error(self, builder: MailBuilder) -> None:
        """Parameter errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            builder.subject(None)  # type: ignore[arg-type]


class TestMailBuilderBuild:
    """Tests for the terminal ``build()`` step."""

    def test_build_returns_mail_bound_to_configuration(self, builder: MailBuilder, config: Configuration) -> None:
        """The mail references the builder's configuration."""
        mail = builder.to("a@example.com").build()
        assert isinstance(mail, Mail)
        assert mail.configuration is config

    def test_build_copies_parameters(self, builder: MailBuilder) -> None:
        """Mutating the builder afterwards does not change a built mail."""
        mail = builder.to("a@example.com").build()
        builder.to("b@example.com")
        assert mail.get_all("to") == ["a@example.com"]

    def test_builders_are_isolated(self, config: Configuration) -> None:
        """Builders sharing a configuration never see each other's fields."""
        first = MailBuilder.using(config).to("a@example.com")
        second = MailBuilder.using(config).to("b@example.com")

        assert first.build().get_all("to") == ["a@example.com"]
        assert second.build().get_all("to") == ["b@example.com"]

    def test_configuration_untouched(self, builder: MailBuilder, config: Configuration) -> None:
        """Building never changes the configuration."""
        before = (config.domain, config.from_, config.default_parameters)
        builder.from_("other@example.com").to("a@example.com").build()
        assert (config.domain, config.from_, config.default_parameters) == before


class TestSingleValuedWarnings:
    """Tests for repeated single-valued parameters."""

    def test_repeated_from_is_kept_and_logged(self, builder: MailBuilder, caplog: pytest.LogCaptureFixture) -> None:
        """A second ``from`` is recorded and a warning is emitted."""
        with caplog.at_level(logging.WARNING, logger="gunmail.builder"):
            mail = builder.from_("a@example.com").from_("b@example.com").build()

        assert mail.get_all("from") == ["a@example.com", "b@example.com"]
        assert "'from' set more than once" in caplog.text

    def test_repeated_recipients_not_logged(self, builder: MailBuilder, caplog: pytest.LogCaptureFixture) -> None:
        """Multi-valued parameters repeat silently."""
        with caplog.at_level(logging.WARNING, logger="gunmail.builder"):
            builder.to("a@example.com").to("b@example.com").tag("x").tag("y")

        assert caplog.text == ""
