"""Host gateway RPC (tools/invoke)."""

from recipekit.core.gateway.client import GatewayClient, parse_tool_text_json

__all__ = ["GatewayClient", "parse_tool_text_json"]
