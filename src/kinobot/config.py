"""Configuration management for Kinobot."""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class TMDBConfig(BaseModel):
    """TMDB API configuration."""

    api_key: Optional[str] = Field(default=None, description="TMDB API key")
    base_url: str = Field(
        default="https://api.themoviedb.org/3", description="TMDB API base URL"
    )
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/original", description="Poster base URL"
    )
    timeout_seconds: float = Field(default=10.0, description="Request timeout")


class GoodreadsConfig(BaseModel):
    """Goodreads scraping configuration."""

    base_url: str = Field(default="https://www.goodreads.com", description="Site root")
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
        ),
        description="User-Agent header sent with page fetches",
    )
    timeout_seconds: float = Field(default=15.0, description="Request timeout")


class ImageSearchConfig(BaseModel):
    """Google Custom Search configuration for image lookups."""

    api_key: Optional[str] = Field(default=None, description="Google API key")
    search_engine_id: Optional[str] = Field(
        default=None, description="Custom search engine id (cx)"
    )
    endpoint: str = Field(
        default="https://www.googleapis.com/customsearch/v1",
        description="Custom search endpoint",
    )


class APIConfig(BaseModel):
    """HTTP command endpoint configuration."""

    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=9494, description="API port")
    shared_secret: Optional[str] = Field(
        default=None, description="Secret for X-Signature request verification"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="text", description="Log format (json or text)")
    level: str = Field(default="info", description="Log level")
    output: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError("Invalid log level")
        return v.lower()


class Config(BaseModel):
    """Main configuration model."""

    tmdb: TMDBConfig = Field(default_factory=TMDBConfig, description="TMDB configuration")
    goodreads: GoodreadsConfig = Field(
        default_factory=GoodreadsConfig, description="Goodreads configuration"
    )
    image_search: ImageSearchConfig = Field(
        default_factory=ImageSearchConfig, description="Image search configuration"
    )
    api: APIConfig = Field(default_factory=APIConfig, description="API configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Recursively substitute environment variables in configuration.

        Replaces ${VAR_NAME} with os.environ['VAR_NAME'].

        Args:
            obj: Configuration object (dict, list, str, etc.)

        Returns:
            Object with environment variables substituted
        """
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            pattern = r"\$\{([^}]+)\}"

            def replace_var(match):
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    raise ValueError(
                        f"Environment variable '{var_name}' not found "
                        f"(referenced in configuration)"
                    )
                return value

            return re.sub(pattern, replace_var, obj)
        else:
            return obj

    @classmethod
    def from_defaults(cls) -> "Config":
        """Create configuration with default values.

        Returns:
            Config instance with defaults
        """
        return cls()


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load configuration from file or use defaults.

    Args:
        path: Optional path to configuration file. If None, uses defaults.

    Returns:
        Config instance
    """
    if path is None:
        return Config.from_defaults()

    return Config.from_yaml(path)
