"""Configuration management for relapseviz using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = ".relapseviz.json"

LAYOUT_ENGINES = ["dot", "neato", "fdp", "sfdp", "twopi", "circo"]


class OutputFormat(str, Enum):
    """Output format types."""
    DOT = "dot"
    MERMAID = "mermaid"
    SVG = "svg"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class RenderConfig(BaseModel):
    """Graph translation and rendering configuration section."""
    full: bool = False
    format: OutputFormat = OutputFormat.DOT
    graph_name: str = Field(alias="graphName", default="Relapse")
    seed: int = 0
    strict_ids: bool = Field(alias="strictIds", default=False)
    engine: str = "dot"

    @field_validator("seed")
    @classmethod
    def validate_seed(cls, v):
        if v < 0:
            raise ValueError("seed must be >= 0")
        return v

    @field_validator("graph_name")
    @classmethod
    def validate_graph_name(cls, v):
        if not v.strip():
            raise ValueError("graph_name must not be blank")
        return v

    @field_validator("engine")
    @classmethod
    def validate_engine(cls, v):
        """Validate Graphviz layout engine name."""
        if v not in LAYOUT_ENGINES:
            raise ValueError(f"engine must be one of {LAYOUT_ENGINES}, got: {v}")
        return v

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class SvgConfig(BaseModel):
    """SVG post-processing configuration section."""
    strip_titles: bool = Field(alias="stripTitles", default=True)
    strip_size: bool = Field(alias="stripSize", default=True)

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class RelapsevizConfig(BaseModel):
    """Complete relapseviz configuration model."""
    render: RenderConfig = Field(default_factory=RenderConfig)
    svg: SvgConfig = Field(default_factory=SvgConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> RelapsevizConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .relapseviz.json

    Returns:
        RelapsevizConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return RelapsevizConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except Exception as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
    else:
        return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .relapseviz.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILENAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> RelapsevizConfig:
    """Create default configuration."""
    return RelapsevizConfig()
