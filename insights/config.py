"""
Insights core settings, read from the environment (and a .env file if present).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from insights.errors import ValidationError

DEFAULT_API_VERSION = "v21.0"
GRAPH_HOST = "https://graph.facebook.com"


@dataclass
class Settings:
    access_token: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    base_url: str = f"{GRAPH_HOST}/{DEFAULT_API_VERSION}"
    timeout: float = 30.0
    default_days: int = 7

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """
        Build settings from META_* / INSIGHTS_* environment variables.

        Raises:
            ValidationError: If a numeric variable cannot be parsed
        """
        load_dotenv(env_file)

        api_version = os.getenv("META_API_VERSION", DEFAULT_API_VERSION)
        return cls(
            access_token=os.getenv("META_ACCESS_TOKEN") or None,
            api_version=api_version,
            base_url=os.getenv("META_BASE_URL", f"{GRAPH_HOST}/{api_version}").rstrip("/"),
            timeout=_env_number("META_TIMEOUT", "30.0", float),
            default_days=_env_number("INSIGHTS_DEFAULT_DAYS", "7", int),
        )


def _env_number(name, default, cast):
    value = os.getenv(name, default)
    try:
        return cast(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {value!r}") from e
