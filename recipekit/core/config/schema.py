"""recipekit configuration schema — YAML + Pydantic + env override."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from recipekit.core.cron.types import CronInstallMode


# ════════════════════════════════════════════════════════════
# SUB-CONFIGS (nested BaseModel)
# ════════════════════════════════════════════════════════════


class GatewayAuthConfig(BaseModel):
    """Bearer token for the host gateway's /tools/invoke endpoint."""

    token: str = ""


class GatewayConfig(BaseModel):
    """Host gateway (job scheduler RPC)."""

    host: str = "127.0.0.1"
    port: int = 18789
    auth: GatewayAuthConfig = Field(default_factory=GatewayAuthConfig)
    timeout_s: float = 30.0
    retry_attempts: int = 3
    retry_delay_s: float = 0.15  # linear: delay * attempt


class RecipesConfig(BaseModel):
    """Recipe workspace layout + cron install policy."""

    workspace_recipes_dir: str = "recipes"
    builtin_recipes_dir: str | None = None
    cron_installation: CronInstallMode = "prompt"


# ════════════════════════════════════════════════════════════
# ROOT CONFIG (BaseSettings, env + .env support)
# ════════════════════════════════════════════════════════════


class Config(BaseSettings):
    """
    Root configuration.

    Priority: env vars > .env > YAML (init kwargs) > defaults

    Env override examples:
        RECIPEKIT_GATEWAY__PORT=18790
        RECIPEKIT_GATEWAY__AUTH__TOKEN=secret
        RECIPEKIT_RECIPES__CRON_INSTALLATION=on
    """

    model_config = SettingsConfigDict(
        env_prefix="RECIPEKIT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    workspace: str = "~/.openclaw/workspace"
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    recipes: RecipesConfig = Field(default_factory=RecipesConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML arrives as init kwargs; env must still win over it
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    # ── Computed properties ─────────────────────────────────

    @property
    def workspace_path(self) -> Path:
        return Path(self.workspace).expanduser().resolve()

    @property
    def gateway_url(self) -> str:
        return f"http://{self.gateway.host}:{self.gateway.port}/tools/invoke"

    def scope_workspace(self, scope_id: str) -> Path:
        """Workspace of a scaffolded team or agent: sibling ``workspace-<id>`` dir."""
        return self.workspace_path.parent / f"workspace-{scope_id}"
