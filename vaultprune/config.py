from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="VAULTPRUNE_", env_file=".env", extra="ignore")

    # Vault settings
    vault_path: Path = Path(".")
    ignore_folders: list[str] = []

    # Image settings
    image_extensions: list[str] = [
        "png",
        "jpg",
        "jpeg",
        "gif",
        "webp",
        "bmp",
        "tif",
        "tiff",
        "svg",
        "avif",
        "heic",
    ]
    supported_formats: list[str] = ["png", "jpeg", "gif", "webp", "bmp", "svg", "avif"]

    # Execution settings
    apply_changes: bool = False  # dry run unless explicitly enabled
    max_workers: int = 8
    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
