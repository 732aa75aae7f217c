"""GatewayClient — sync httpx wrapper for the host's /tools/invoke endpoint."""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any

import httpx
from loguru import logger

from recipekit.errors import (
    ConfigurationError,
    ParseError,
    RemoteToolError,
    RemoteUnavailable,
)

if TYPE_CHECKING:
    from recipekit.core.config.schema import Config

TOOLS_INVOKE_TIMEOUT_S = 30.0
RETRY_ATTEMPTS = 3
RETRY_DELAY_BASE_S = 0.15


class GatewayClient:
    """Authenticated tool invocation against the host gateway.

    Every ``invoke`` is one logical RPC: up to ``attempts`` POSTs with a
    linear backoff in between. Transport failures surface as
    RemoteUnavailable, tool-level failures as RemoteToolError. The token is
    only required once a call is made.
    """

    def __init__(
        self,
        url: str,
        token: str | None,
        timeout: float = TOOLS_INVOKE_TIMEOUT_S,
        attempts: int = RETRY_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_BASE_S,
        http: httpx.Client | None = None,
    ):
        self._url = url
        self._token = token
        self._attempts = max(1, attempts)
        self._retry_delay = retry_delay
        self._http = http or httpx.Client(timeout=timeout)

    @classmethod
    def from_config(cls, config: Config) -> GatewayClient:
        gw = config.gateway
        return cls(
            url=config.gateway_url,
            token=gw.auth.token,
            timeout=gw.timeout_s,
            attempts=gw.retry_attempts,
            retry_delay=gw.retry_delay_s,
        )

    # ── Internal ─────────────────────────────────────────────

    def _require_token(self) -> None:
        if not self._token:
            raise ConfigurationError(
                "Missing gateway.auth.token in config (required for tools/invoke)"
            )

    def _build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._token}",
        }

    @staticmethod
    def _error_message(body: Any, status_code: int) -> str:
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        return f"tools/invoke failed ({status_code})"

    def _invoke_once(self, request: dict[str, Any]) -> Any:
        resp = self._http.post(self._url, headers=self._build_headers(), json=request)
        try:
            body = resp.json()
        except ValueError as e:
            if resp.status_code >= 400:
                raise RemoteToolError(
                    f"tools/invoke failed ({resp.status_code})", resp.status_code
                ) from e
            raise ParseError("tools/invoke", resp.text, str(e)) from e
        if resp.status_code >= 400 or not (isinstance(body, dict) and body.get("ok")):
            raise RemoteToolError(self._error_message(body, resp.status_code), resp.status_code)
        return body.get("result")

    def _backoff(self, tool: str, attempt: int, error: Exception) -> None:
        logger.warning(f"tools/invoke {tool} attempt {attempt}/{self._attempts} failed: {error}")
        time.sleep(self._retry_delay * attempt)

    # ── Public ───────────────────────────────────────────────

    def invoke(self, tool: str, args: dict[str, Any] | None = None) -> Any:
        """POST ``{tool, args}`` and return the response's ``result``.

        ParseError (malformed body) is raised on the first occurrence;
        the last attempt's failure is raised as-is or as RemoteUnavailable.
        """
        self._require_token()
        request: dict[str, Any] = {"tool": tool, "args": args or {}}

        for attempt in range(1, self._attempts + 1):
            last = attempt == self._attempts
            try:
                return self._invoke_once(request)
            except httpx.TransportError as e:
                if last:
                    raise RemoteUnavailable(
                        f"Gateway unavailable after {self._attempts} attempts: {e}"
                    ) from e
                self._backoff(tool, attempt, e)
            except RemoteToolError as e:
                if last:
                    raise
                self._backoff(tool, attempt, e)

    def close(self) -> None:
        """Close underlying httpx client."""
        self._http.close()


def parse_tool_text_json(result: Any, label: str) -> Any:
    """Extract and parse the JSON text block of a tool result.

    Tool results look like ``{"content": [{"type": "text", "text": "..."}]}``.
    Returns None when there is no text; raises ParseError on malformed JSON.
    """
    content = result.get("content") if isinstance(result, dict) else None
    text = None
    for block in content or []:
        if isinstance(block, dict) and block.get("type") == "text":
            text = block.get("text")
            break
    trimmed = str(text or "").strip()
    if not trimmed:
        return None
    try:
        return json.loads(trimmed)
    except json.JSONDecodeError as e:
        raise ParseError(label, trimmed, str(e)) from e
