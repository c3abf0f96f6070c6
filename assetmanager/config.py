"""Global configuration — loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class AssetManagerSettings(BaseSettings):
    db_path: Path = Path(".assetmanager/assetmanager.db")
    log_level: str = "INFO"

    model_config = {"env_prefix": "ASSETMANAGER_"}


settings = AssetManagerSettings()
