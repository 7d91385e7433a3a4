"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

# Repository-level config directory (src/govcore/core/config.py -> repo root)
CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"


class WorkflowConfig(BaseSettings):
    """Approval workflow and review scheduling configuration."""

    model_config = {"env_prefix": "GOVCORE_WORKFLOW_"}

    status_aliases_path: str = str(CONFIG_DIR / "status_aliases.yml")
    due_soon_days: int = 7


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "GOVCORE_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)
