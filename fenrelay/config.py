"""
Runtime configuration, read from the environment.

The vision credential is optional at startup: a missing key only fails
uploads, at call time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os

from .errors import ConfigurationError


DEFAULT_MODEL = "gemini-2.5-pro"
DEFAULT_PORT = 3000


@dataclass
class RelayConfig:
    """Settings for the relay server and its vision collaborator."""
    gemini_api_key: str | None = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    model: str = DEFAULT_MODEL
    temperature: float = 0.1
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> RelayConfig:
        """Build a config from environment variables (or a given mapping)."""
        env = os.environ if environ is None else environ
        return cls(
            gemini_api_key=env.get("GEMINI_API_KEY") or None,
            host=env.get("HOST", "0.0.0.0"),
            port=_parse_number(env, "PORT", int, DEFAULT_PORT),
            model=env.get("FENRELAY_MODEL", DEFAULT_MODEL),
            temperature=_parse_number(env, "FENRELAY_TEMPERATURE", float, 0.1),
            allowed_origins=[
                origin.strip()
                for origin in env.get("ALLOWED_ORIGINS", "*").split(",")
                if origin.strip()
            ],
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


def _parse_number(env, name: str, kind: type, default):
    value = env.get(name)
    if value is None or value == "":
        return default
    try:
        return kind(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
