"""
Application Settings
===================

Main application settings and rendering defaults using Pydantic Settings.
Supports development, testing, and production environments.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="AMP Story Renderer", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Document Configuration
    document_lang: str = Field(default="en", description="Value of the <html lang> attribute")
    amp_runtime_url: str = Field(
        default="https://cdn.ampproject.org/v0.js", description="AMP runtime script URL"
    )
    amp_story_script_url: str = Field(
        default="https://cdn.ampproject.org/v0/amp-story-1.0.js",
        description="amp-story extension script URL",
    )
    amp_video_script_url: str = Field(
        default="https://cdn.ampproject.org/v0/amp-video-0.1.js",
        description="amp-video extension script URL",
    )

    # Output Configuration
    pretty_print: bool = Field(default=True, description="Re-indent the generated document")
    indent_size: int = Field(default=2, ge=0, le=8, description="Spaces per nesting level")
    escape_text: bool = Field(
        default=False, description="HTML-escape text element content (for untrusted stories)"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="AMP_STORY_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
