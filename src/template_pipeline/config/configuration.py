"""
Configuration model for template renderers.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from ..error.exceptions import ConfigurationError, ErrorContext

logger = logging.getLogger(__name__)

COLLISION_POLICIES = {"overwrite", "warn", "error"}

class RendererConfiguration(BaseModel):
    """Configuration for loading and rendering templates."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    # Load settings
    minify: bool = Field(default=True, description="Minify sources by MIME type while loading")
    encoding: str = Field(default="utf-8", description="Encoding of template source files")
    on_collision: str = Field(default="overwrite", description="Policy for duplicate template names")
    extra_mime_types: Dict[str, str] = Field(
        default_factory=dict,
        description="Additional file extension to MIME type mappings"
    )

    # Reload settings
    live_reload: bool = Field(default=False, description="Reload a template set before every execution")
    production: bool = Field(default=False, description="Marks a production deployment")

    # Engine settings
    strict_undefined: bool = Field(default=True, description="Fail on undefined template variables")
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Logging settings
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    json_logging: bool = False

    @field_validator("on_collision")
    @classmethod
    def validate_on_collision(cls, value: str) -> str:
        """Validate the name collision policy."""
        if value.lower() not in COLLISION_POLICIES:
            raise ValueError(f"Invalid collision policy '{value}'. Must be one of: {sorted(COLLISION_POLICIES)}")
        return value.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        value_upper = value.upper()
        if value_upper not in valid_levels:
            raise ValueError(f"Invalid log level '{value}'. Must be one of: {valid_levels}")
        return value_upper

    @field_validator("extra_mime_types")
    @classmethod
    def normalize_extensions(cls, value: Dict[str, str]) -> Dict[str, str]:
        """Make sure every extension starts with a dot."""
        normalized = {}
        for ext, mime_type in value.items():
            if not ext:
                raise ValueError("Empty file extension in extra_mime_types")
            normalized[ext if ext.startswith(".") else f".{ext}"] = mime_type
        return normalized

    @model_validator(mode="after")
    def validate_live_reload(self) -> 'RendererConfiguration':
        """Live reload is a development-only setting."""
        if self.live_reload and self.production:
            raise ValueError("live_reload cannot be enabled in production")
        if self.live_reload:
            logger.warning(
                "Live reload is enabled: template sets are reloaded before every execution. "
                "This is unsafe for concurrent use and must not be used in production."
            )
        return self


def ensure_renderer_config(
    config: Optional[Union[RendererConfiguration, Dict[str, Any]]] = None,
    **overrides: Any
) -> RendererConfiguration:
    """
    Ensure a valid renderer configuration.

    Args:
        config: An existing configuration, a dictionary of settings, or None
        **overrides: Settings that take precedence over ``config``

    Returns:
        Validated RendererConfiguration

    Raises:
        ConfigurationError: If the settings do not validate
    """
    if isinstance(config, RendererConfiguration):
        if not overrides:
            return config
        config = config.model_dump()

    settings = {**(config or {}), **overrides}
    try:
        return RendererConfiguration(**settings)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            context=ErrorContext(component="config", operation="ensure_renderer_config")
        ) from e
