"""Shared core — settings, identifier keys, and the command result envelope."""

import os
import re
from dataclasses import dataclass

from mcp.server.fastmcp.exceptions import ToolError

DEFAULT_AUTH_ALIAS = "dev252193"
AUTH_ALIAS_ENV = "SNC_DEFAULT_AUTH_ALIAS"
SDK_COMMAND = ("npx", "now-sdk")
SDK_TIMEOUT = 120.0

_NON_IDENT = re.compile(r"[^A-Za-z0-9_]")


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup."""

    default_auth_alias: str = DEFAULT_AUTH_ALIAS
    sdk_command: tuple[str, ...] = SDK_COMMAND
    timeout: float = SDK_TIMEOUT

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(default_auth_alias=env.get(AUTH_ALIAS_ENV) or DEFAULT_AUTH_ALIAS)


def id_key(text: str) -> str:
    """Turn a display string into a stable record key.

    Every character outside [A-Za-z0-9_] becomes '_', then the result is
    lowercased. "Asset Tracker" and "Asset-Tracker" both give "asset_tracker".
    """
    return _NON_IDENT.sub("_", text).lower()


@dataclass(frozen=True)
class CommandResult:
    """Text returned to the caller, flagged when it describes a failure."""

    text: str
    is_error: bool = False

    def unwrap(self) -> str:
        if self.is_error:
            raise ToolError(self.text)
        return self.text
