"""Configuration shared by mail builders and the transport.

A :class:`Configuration` holds the sending domain, the API key, the API
base URL and an optional default sender. It is immutable: the ``with_*``
helpers return modified copies, so one instance can be shared by any
number of builders.

Configurations can be loaded from a mapping or a YAML file::

    mailgun:
      domain: mg.example.com
      api_key: "${MAILGUN_API_KEY}"
      region: eu
      from:
        name: Example
        address: noreply@example.com
      default_parameters:
        o:tracking: "no"
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gunmail.exceptions import MailConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.mailgun.net/v3"

#: Base URLs per Mailgun region.
REGION_API_URLS: dict[str, str] = {
    "us": DEFAULT_API_URL,
    "eu": "https://api.eu.mailgun.net/v3",
}

# Pattern for environment variable substitution: ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([a-zA-Z_][a-zA-Z0-9_]*)(?::-([^}]*))?\}")


def format_address(name: str, address: str) -> str:
    """Return ``"name <address>"``.

    Examples:
        >>> format_address("Emmet Brown", "doc@delorean.com")
        'Emmet Brown <doc@delorean.com>'
    """
    return f"{name} <{address}>"


def _expand_env_vars(value: str, source: str | None = None) -> str:
    """Expand ``${VAR}`` and ``${VAR:-default}`` in a string.

    Raises:
        MailConfigurationError: If a variable without default is not set.

    Examples:
        >>> os.environ["GUNMAIL_DOCTEST"] = "mg.example.com"
        >>> _expand_env_vars("${GUNMAIL_DOCTEST}")
        'mg.example.com'
        >>> _expand_env_vars("${GUNMAIL_MISSING:-fallback}")
        'fallback'
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default_value = match.group(2)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if default_value is not None:
            return default_value

        where = f" (required by {source})" if source else ""
        raise MailConfigurationError(
            f"Environment variable '{var_name}' is not set{where}",
            details={"var_name": var_name, "source": source},
        )

    return _ENV_VAR_PATTERN.sub(replacer, value)


def _expand_env_vars_recursive(data: Any, source: str | None = None) -> Any:
    """Apply ``_expand_env_vars`` to every string in nested dicts and lists."""
    if isinstance(data, dict):
        return {k: _expand_env_vars_recursive(v, source) for k, v in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars_recursive(item, source) for item in data]
    if isinstance(data, str):
        return _expand_env_vars(data, source)
    return data


def _mask(secret: str) -> str:
    """Keep the last four characters of a secret."""
    if len(secret) <= 4:
        return "****"
    return f"****{secret[-4:]}"


@dataclass(frozen=True, slots=True)
class Configuration:
    """Settings for talking to the Mailgun API.

    Attributes:
        domain: Sending domain, part of the endpoint path.
        api_key: Private API key (basic auth password, user ``api``).
        from_: Default sender used when a mail does not set ``from``.
        api_url: API base URL without trailing slash.
        default_parameters: Parameters added to every delivered mail
            whose name the mail does not already set.
        timeout: HTTP timeout in seconds.

    Examples:
        >>> config = Configuration(domain="mg.example.com", api_key="key-123")
        >>> config.messages_url
        'https://api.mailgun.net/v3/mg.example.com/messages'
    """

    domain: str
    api_key: str
    from_: str | None = None
    api_url: str = DEFAULT_API_URL
    default_parameters: tuple[tuple[str, str], ...] = ()
    timeout: float = 30.0

    def __post_init__(self) -> None:
        """Validate values.

        Raises:
            MailConfigurationError: If a required value is empty or the
                timeout is not positive.
        """
        if not self.domain:
            raise MailConfigurationError("Mailgun domain is required")
        if not self.api_key:
            raise MailConfigurationError("Mailgun API key is required")
        if not self.api_url:
            raise MailConfigurationError("Mailgun API URL is required")
        if self.timeout <= 0:
            raise MailConfigurationError("Timeout must be greater than 0")
        for name, value in self.default_parameters:
            if name is None or value is None:
                raise MailConfigurationError(f"Default parameter {name!r} must have a name and a value")
        object.__setattr__(self, "api_url", self.api_url.rstrip("/"))
        object.__setattr__(self, "default_parameters", tuple(tuple(p) for p in self.default_parameters))

    @property
    def messages_url(self) -> str:
        """Return the URL of the ``messages`` endpoint for this domain."""
        return f"{self.api_url}/{self.domain}/messages"

    @property
    def masked_api_key(self) -> str:
        """Return the API key with all but the last characters hidden."""
        return _mask(self.api_key)

    def with_from(self, address: str, name: str | None = None) -> Configuration:
        """Return a copy with another default sender.

        Args:
            address: Sender address.
            name: Optional display name, rendered as ``"name <address>"``.
        """
        sender = format_address(name, address) if name else address
        return replace(self, from_=sender)

    def with_default_parameter(self, name: str, value: str) -> Configuration:
        """Return a copy with one more default parameter."""
        return replace(self, default_parameters=(*self.default_parameters, (name, value)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, source: str | None = None) -> Configuration:
        """Build a configuration from a plain mapping.

        Args:
            data: Keys ``domain``, ``api_key``, ``from``, ``api_url``,
                ``region``, ``default_parameters``, ``timeout``.
            source: Origin of the data, used in error messages.

        Returns:
            Configuration instance.

        Raises:
            MailConfigurationError: If values are missing or malformed.
        """
        if not isinstance(data, dict):
            data = dict(data)
        data = _expand_env_vars_recursive(data, source)

        region = str(data.get("region", "us")).lower()
        if region not in REGION_API_URLS:
            raise MailConfigurationError(
                f"Unknown Mailgun region: {region!r}. Allowed: {sorted(REGION_API_URLS)}",
                details={"region": region, "source": source},
            )
        api_url = data.get("api_url") or REGION_API_URLS[region]

        sender = data.get("from")
        if isinstance(sender, dict):
            address = sender.get("address")
            if not address:
                raise MailConfigurationError("'from.address' is required when 'from' is a mapping")
            name = sender.get("name")
            sender = format_address(name, address) if name else address

        defaults = data.get("default_parameters") or {}
        if not isinstance(defaults, dict):
            raise MailConfigurationError("'default_parameters' must be a mapping")

        try:
            timeout = float(data.get("timeout", 30.0))
        except (TypeError, ValueError) as e:
            raise MailConfigurationError(f"Invalid timeout: {data.get('timeout')!r}") from e

        config = cls(
            domain=str(data.get("domain") or ""),
            api_key=str(data.get("api_key") or ""),
            from_=sender,
            api_url=str(api_url),
            default_parameters=tuple((str(k), str(v)) for k, v in defaults.items()),
            timeout=timeout,
        )
        log.debug("Loaded configuration for domain %s (%s)", config.domain, source or "mapping")
        return config

    @classmethod
    def from_file(cls, path: str | Path, *, section: str | None = "mailgun") -> Configuration:
        """Load a configuration from a YAML file.

        Args:
            path: YAML file location.
            section: Top-level key holding the settings. When the key is
                absent (or *section* is ``None``) the whole document is used.

        Returns:
            Configuration instance.

        Raises:
            MailConfigurationError: If the file is missing or malformed.
        """
        import yaml

        path = Path(path).expanduser()
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise MailConfigurationError(f"Configuration file not found: {path}") from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise MailConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise MailConfigurationError(f"Invalid configuration format in {path}: expected mapping")

        if section is not None and isinstance(data.get(section), dict):
            data = data[section]

        return cls.from_mapping(data, source=str(path))

    def __repr__(self) -> str:
        return (
            f"Configuration(domain={self.domain!r}, api_key={self.masked_api_key!r}, "
            f"from_={self.from_!r}, api_url={self.api_url!r})"
        )


__all__ = [
    "DEFAULT_API_URL",
    "REGION_API_URLS",
    "Configuration",
    "format_address",
]
