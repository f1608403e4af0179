"""Configuration Management with Pydantic.

This module implements configuration models using Pydantic for parsing and
validation of YAML configuration files with environment variable overrides.
Configuration is only read by the command-line layer; the graph core takes
plain arguments.
"""

import os
from pathlib import Path
from typing import Literal

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator

from podwhy.graph.builder import DuplicatePolicy

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_NAMES = ("podwhy.yaml", "podwhy.yml")


class SourceConfig(BaseModel):
    """Where dependency records come from and how they are normalized.

    Attributes:
        cache: YAML snapshot of dependency records
        subspec_separator: Substring marking a subspec dependency
        duplicate_policy: How to treat a pod that occurs in several records
    """

    cache: Path | None = Field(
        default=None,
        description="Path to a YAML snapshot of dependency records",
    )
    subspec_separator: str = Field(
        default="/",
        min_length=1,
        description="Substring marking a subspec dependency",
    )
    duplicate_policy: DuplicatePolicy = Field(
        default=DuplicatePolicy.ERROR,
        description="'error' or 'last_wins'",
    )

    model_config = {"str_strip_whitespace": True}


class GraphConfig(BaseModel):
    """Graph checks applied before traversal.

    Attributes:
        check_cycles: Reject cyclic graphs before running a query
    """

    check_cycles: bool = Field(
        default=True,
        description="Reject cyclic graphs before traversal",
    )


class OutputConfig(BaseModel):
    """Output file settings.

    Attributes:
        to_yaml: Write the result snapshot to this file
        to_dot: Write the result graph description to this file
        graph_format: Format of the graph description ('dot' or 'mermaid')
    """

    to_yaml: Path | None = Field(default=None, description="YAML output file")
    to_dot: Path | None = Field(default=None, description="Graph output file")
    graph_format: Literal["dot", "mermaid"] = Field(
        default="dot",
        description="Graph description format",
    )

    @field_validator("graph_format", mode="before")
    @classmethod
    def normalize_format(cls, v: object) -> object:
        if isinstance(v, str):
            return v.lower().strip()
        return v


class WhyConfig(BaseModel):
    """Main configuration combining all settings.

    Attributes:
        source: Record source configuration
        graph: Graph check configuration
        output: Output file configuration
        logging_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render logs as JSON instead of console output
    """

    source: SourceConfig = Field(default_factory=SourceConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging_level: str = Field(
        default="WARNING",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    @field_validator("logging_level", mode="before")
    @classmethod
    def upper_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.upper().strip()
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "WhyConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Parsed and validated WhyConfig instance

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If configuration is invalid or the YAML cannot be parsed
        """
        config_path = Path(path)

        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_configuration", path=str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.exception("yaml_parse_error", error=str(e), path=str(config_path))
            msg = f"Invalid YAML in configuration file: {e}"
            raise ValueError(msg) from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            msg = "Configuration file must contain a mapping"
            raise ValueError(msg)

        config = cls.from_dict(config_data)

        logger.info(
            "configuration_loaded",
            cache=str(config.source.cache) if config.source.cache else None,
            logging_level=config.logging_level,
        )

        return config

    @classmethod
    def from_dict(cls, config_data: dict) -> "WhyConfig":
        """Build configuration from a mapping, applying environment overrides."""
        return cls(**cls._apply_env_overrides(config_data))

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Apply environment variable overrides to configuration.

        Environment variables follow the pattern: PODWHY_<SECTION>_<KEY>
        Example: PODWHY_SOURCE_CACHE, PODWHY_GRAPH_CHECK_CYCLES

        Args:
            config_data: Base configuration dictionary from file

        Returns:
            Configuration dictionary with environment overrides applied
        """
        env_overrides = {
            # Source configuration
            ("source", "cache"): "PODWHY_SOURCE_CACHE",
            ("source", "subspec_separator"): "PODWHY_SOURCE_SUBSPEC_SEPARATOR",
            ("source", "duplicate_policy"): "PODWHY_SOURCE_DUPLICATE_POLICY",
            # Graph configuration
            ("graph", "check_cycles"): "PODWHY_GRAPH_CHECK_CYCLES",
            # Output configuration
            ("output", "to_yaml"): "PODWHY_OUTPUT_TO_YAML",
            ("output", "to_dot"): "PODWHY_OUTPUT_TO_DOT",
            ("output", "graph_format"): "PODWHY_OUTPUT_GRAPH_FORMAT",
            # Logging
            ("logging_level",): "PODWHY_LOGGING_LEVEL",
            ("json_logs",): "PODWHY_JSON_LOGS",
        }

        for path, env_var in env_overrides.items():
            value = os.environ.get(env_var)
            if value is not None:
                # Navigate to nested config section
                current = config_data
                for key in path[:-1]:
                    if not isinstance(current.get(key), dict):
                        current[key] = {}
                    current = current[key]

                # Convert string values to appropriate types
                final_key = path[-1]
                if env_var.endswith(("_CHECK_CYCLES", "_JSON_LOGS")):
                    value = value.lower() in ("true", "1", "yes")

                current[final_key] = value
                logger.debug(
                    "env_override_applied",
                    env_var=env_var,
                    config_path=".".join(path),
                )

        return config_data

    def validate_config(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Returns:
            List of validation warning messages (empty if no warnings)
        """
        warnings = []

        if self.source.cache is not None and not self.source.cache.exists():
            warnings.append(f"Record cache does not exist: {self.source.cache}")

        if not self.graph.check_cycles:
            warnings.append(
                "Cycle check is disabled - results on cyclic graphs are unspecified",
            )

        if self.source.duplicate_policy is DuplicatePolicy.LAST_WINS:
            warnings.append(
                "Duplicate records resolve last-write-wins - conflicting input is not reported",
            )

        if self.output.to_dot and self.output.graph_format == "mermaid" and (
            self.output.to_dot.suffix == ".dot"
        ):
            warnings.append("Mermaid output is being written to a .dot file")

        return warnings


def load_config(config_path: str | Path | None = None) -> WhyConfig:
    """Load configuration from file.

    Args:
        config_path: Path to configuration file. If None, looks for
            podwhy.yaml or podwhy.yml in the current directory and falls back
            to defaults (with environment overrides) when neither exists.

    Raises:
        FileNotFoundError: If an explicit config file is not found
        ValueError: If the config file is invalid
    """
    if config_path is None:
        for default_name in DEFAULT_CONFIG_NAMES:
            default_path = Path(default_name)
            if default_path.exists():
                return WhyConfig.from_yaml(default_path)

        logger.debug("no_configuration_file_using_defaults")
        return WhyConfig.from_dict({})

    return WhyConfig.from_yaml(config_path)


__all__ = [
    "GraphConfig",
    "OutputConfig",
    "SourceConfig",
    "WhyConfig",
    "load_config",
]
