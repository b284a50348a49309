"""Token engine configuration.

Loads and validates ``token-engine.config.json`` files.
"""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .codecs.base import normalize_number
from .codecs.dimension import FONT_SIZE, RADIUS, SPACING, DimensionProfile
from .engine_logging import get_logger
from .errors import ConfigurationError

logger = get_logger()

# Default configuration file name
CONFIG_FILENAME = "token-engine.config.json"
CONFIG_ENV_VAR = "TOKEN_ENGINE_CONFIG"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DimensionDefaults(BaseModel):
    """Default values used when a dimension token value is unreadable."""

    spacing: float = Field(default=SPACING.default_value, ge=0)
    radius: float = Field(default=RADIUS.default_value, ge=0)
    font_size: float = Field(default=FONT_SIZE.default_value, gt=0)

    def profiles(self) -> dict[str, DimensionProfile]:
        """Dimension profiles carrying the configured defaults."""
        return {
            "spacing": SPACING.with_default(normalize_number(self.spacing)),
            "radius": RADIUS.with_default(normalize_number(self.radius)),
            "font-size": FONT_SIZE.with_default(normalize_number(self.font_size)),
        }


class ExportConfig(BaseModel):
    """Stylesheet export options."""

    selector: str = Field(default=":root", min_length=1)
    include_comments: bool = Field(default=True)
    include_header: bool = Field(default=True)
    minify: bool = Field(default=False)


class LoggingConfig(BaseModel):
    """Logging options."""

    level: str = Field(default="INFO")
    format: str = Field(default="text")
    file: Path | None = Field(default=None)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the log level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate the log format."""
        if v not in ("text", "json"):
            raise ValueError("format must be 'text' or 'json'")
        return v


class EngineConfig(BaseModel):
    """Main token engine configuration."""

    dimensions: DimensionDefaults = Field(default_factory=DimensionDefaults)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Create from dictionary, validating every field."""
        return cls.model_validate(data)


class ConfigLoader:
    """Loader for token engine configuration."""

    def __init__(self, project_path: Path | None = None):
        """Initialize the config loader.

        Args:
            project_path: Path to the project root. Defaults to current directory.
        """
        self.project_path = Path(project_path) if project_path else Path.cwd()

    def load(self, config_path: Path | None = None) -> EngineConfig:
        """Load configuration.

        Precedence (highest to lowest):
        1. Explicit config_path
        2. Environment variable TOKEN_ENGINE_CONFIG
        3. token-engine.config.json in project root
        4. Default configuration

        Args:
            config_path: Optional explicit path to config file.

        Returns:
            Loaded EngineConfig instance.

        Raises:
            ConfigurationError: If an explicit path is missing or a file is invalid.
        """
        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigurationError(
                    f"Config file not found: {config_path}",
                    config_file=str(config_path),
                    suggestion="Check the --config path",
                )
            return self._load_from_file(config_path)

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            env_config_path = Path(env_path)
            if env_config_path.exists():
                return self._load_from_file(env_config_path)
            logger.warning(f"{CONFIG_ENV_VAR} points to missing file {env_path}")

        project_config = self.project_path / CONFIG_FILENAME
        if project_config.exists():
            return self._load_from_file(project_config)

        logger.debug("No token engine config found, using defaults")
        return EngineConfig()

    def _load_from_file(self, config_path: Path) -> EngineConfig:
        """Load configuration from a file.

        Raises:
            ConfigurationError: If the file is not valid JSON or fails validation.
        """
        logger.debug(f"Loading token engine config from {config_path}")
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}", config_file=str(config_path)
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a JSON object", config_file=str(config_path)
            )

        try:
            return EngineConfig.from_dict(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e.errors()[0]['msg']}",
                config_file=str(config_path),
            ) from e

    def save(self, config: EngineConfig, config_path: Path | None = None) -> Path:
        """Save configuration to a file.

        Args:
            config: Configuration to save.
            config_path: Optional path. Defaults to project root.

        Returns:
            Path where config was saved.
        """
        if config_path is None:
            config_path = self.project_path / CONFIG_FILENAME

        content = json.dumps(config.to_dict(), indent=2)
        config_path.write_text(content, encoding="utf-8")
        logger.info(f"Saved token engine config to {config_path}")
        return config_path


def load_config(
    project_path: Path | None = None, config_path: Path | None = None
) -> EngineConfig:
    """Convenience function to load the engine configuration."""
    return ConfigLoader(project_path).load(config_path)
