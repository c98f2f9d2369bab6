"""Configuration for the workflow orchestrator.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Nothing is required: with no configuration the store starts empty and the
server accepts the local Vite dev origins.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_orchestrator.ids import DEFAULT_ID_LENGTH


class WorkflowSettings(BaseSettings):
    """Settings for the store, CLI and REST server.

    Environment variables:
    - LOG_LEVEL              (optional)
    - WORKFLOW_SEED_PATH     (optional)
    - WORKFLOW_ID_LENGTH     (optional)
    - WORKFLOW_CORS_ORIGINS  (optional)

    Notes:
        Tests can point at a specific env file via
        `WorkflowSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    seed_path: Path | None = Field(
        default=None,
        validation_alias="WORKFLOW_SEED_PATH",
        description=(
            "JSON file with the initial user directory and templates. "
            "When unset the store starts with no templates and no users."
        ),
    )

    id_length: int = Field(
        default=DEFAULT_ID_LENGTH,
        validation_alias="WORKFLOW_ID_LENGTH",
        description="Length of generated entity identifiers",
        ge=6,
        le=32,
    )

    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="WORKFLOW_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
