"""Settings for the converter, the CLI and the batch runner."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from wsdl_openapi.errors import ConfigError

DEFAULT_TITLE = "wsdl-conversion"
DEFAULT_API_VERSION = "1.0.0"
OPENAPI_VERSION = "3.0.1"


class Settings(BaseModel):
    """Conversion settings. Every field has a working default."""

    timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout for fetching remote documents.")
    default_title: str = Field(default=DEFAULT_TITLE, description="Title used when the WSDL has no name.")
    api_version: str = Field(default=DEFAULT_API_VERSION, description="Value of info.version.")
    output_format: str = Field(default="json", pattern="^(json|yaml)$")
    log_level: str = "WARNING"
    log_format: str = Field(default="console", pattern="^(console|json)$")

    @classmethod
    def from_file(cls, file_path: Path) -> "Settings":
        """Load settings from a YAML or JSON file (JSON is valid YAML)."""
        try:
            data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read settings file {file_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {file_path} must contain a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings in {file_path}: {e}") from e
