"""Server configuration.

ServerConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups at request time.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from switchyard.errors import ConfigurationError

# camelCase keys accepted by from_mapping(), as written in JSON config files
_ALIASES: dict[str, str] = {
    "logStackOnError": "log_stack_on_error",
    "exposeApiMap": "expose_api_map",
}

_REQUIRED = ("host", "port", "url")


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    ``host``, ``port`` and ``url`` are required; everything else has a
    default::

        config = ServerConfig(host="localhost", port=5000, url="http://localhost:5000")
    """

    # Server
    host: str
    port: int | str
    url: str

    # Errors
    log_stack_on_error: bool = True  # Log full tracebacks, not just the message
    debug: bool = False  # Include status codes in default error bodies

    # API map: GET <api>/ returns every registered api route
    expose_api_map: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ServerConfig:
        """Build a config from a plain mapping (e.g. a parsed JSON file).

        Accepts both ``snake_case`` and ``camelCase`` keys. Unknown keys
        are ignored.

        Raises:
            ConfigurationError: If a required key is missing.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in known:
                values[name] = value

        missing = [name for name in _REQUIRED if name not in values]
        if missing:
            msg = f"Missing required server config: {', '.join(missing)}"
            raise ConfigurationError(msg)

        return cls(**values)
