"""Tool configuration models."""

from pydantic import BaseModel, Field, field_validator


DEFAULT_COMPOSE_FILE = "incus-compose.yaml"


class ComposerConfig(BaseModel):
    """Settings for one incus-compose invocation."""
    compose_file: str = Field(default=DEFAULT_COMPOSE_FILE)
    log_level: str = Field(default="WARNING")
    verbose_script: bool = Field(default=False, description="Echo each command in generated scripts")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()
