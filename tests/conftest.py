"""Shared pytest fixtures for the gunmail test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["FORCE_COLOR"] = "0"
os.environ["COLUMNS"] = "200"  # Prevent text wrapping in CLI output

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from gunmail import Configuration, MailBuilder

# pylint: disable=redefined-outer-name


@pytest.fixture
def config() -> Configuration:
    """Return a configuration with a default sender."""

    return Configuration(
        domain="mg.example.com",
        api_key="key-0123456789abcdef",
        from_="Example <noreply@example.com>",
    )


@pytest.fixture
def builder(config: Configuration) -> MailBuilder:
    """Return a fresh builder bound to the shared configuration."""

    return MailBuilder.using(config)


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Build fake httpx responses."""

    def _make(status_code: int = 200, payload: Any = None, text: str = "") -> MagicMock:
        """Return a response double with ``status_code``, ``json()`` and ``text``."""

        response = MagicMock()
        response.status_code = status_code
        if payload is None:
            response.json.side_effect = ValueError("no json")
        else:
            response.json.return_value = payload
        response.text = text
        return response

    return _make
