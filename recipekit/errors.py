"""Exception hierarchy for recipe installation and cron reconciliation."""

from __future__ import annotations


class RecipeKitError(Exception):
    """Base class for all recipekit errors."""


class ValidationError(RecipeKitError):
    """Malformed recipe or cron job declaration. Never retried."""


class ConfigurationError(RecipeKitError):
    """Missing or invalid host configuration (e.g. no gateway token)."""


class RemoteError(RecipeKitError):
    """Base class for failures talking to the host gateway."""


class RemoteUnavailable(RemoteError):
    """Gateway unreachable after all retry attempts (reset, refused, timeout)."""


class RemoteToolError(RemoteError):
    """Gateway answered but the tool call failed (HTTP error or ok=false)."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ParseError(RemoteError):
    """Tool response text could not be parsed as the expected JSON."""

    def __init__(self, label: str, text: str = "", detail: str = ""):
        self.label = label
        self.text = text
        msg = f"Failed parsing JSON from tool text ({label})"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
