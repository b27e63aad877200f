from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Load .env for local/dev environments only where values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from MAPGEN_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MAPGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Map Generation Defaults
    default_seed: int = Field(default=0xDEADBEEF, description="Default map seed")
    default_grid_size: int = Field(default=20, description="Default sites per grid side")
    default_jitter: float = Field(default=1.0, description="Default site jitter")
    default_elevation_threshold: float = Field(default=0.65, description="Default low/high cutoff")
    default_domain_size: float = Field(default=25.0, description="Default elevation normalization extent")
    default_relaxation_iterations: int = Field(default=0, description="Default Lloyd relaxation passes")


# Instantiate singleton settings object
settings = Settings()
