"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .adapters.json_rule_source import JsonRuleSource
from .adapters.rule_records import RuleRecord
from .domain.exceptions import InvalidTimezoneError
from .domain.materializer import resolve_timezone
from .domain.models import Rule
from .services.availability_service import (
    DEFAULT_MAX_RANGE_DAYS,
    RuleSourceProtocol,
    StaticRuleSource,
)


class DefaultsConfig(BaseModel):
    """Default settings for availability requests."""
    range_days: int = 7
    max_range_days: int = DEFAULT_MAX_RANGE_DAYS

    @field_validator("range_days", "max_range_days")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure day counts are positive."""
        if value <= 0:
            raise ValueError("day counts must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_range_order(self) -> "DefaultsConfig":
        """Ensure the default range fits within the maximum."""
        if self.range_days > self.max_range_days:
            raise ValueError("range_days must not exceed max_range_days")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    availability: List[RuleRecord] = Field(default_factory=list)
    rules_file: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is known to the zone database."""
        try:
            resolve_timezone(value)
        except InvalidTimezoneError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative rule files are resolved against the config file location
        if config.rules_file is not None and not config.rules_file.is_absolute():
            config.rules_file = config_path.parent / config.rules_file

        return config

    def get_rules(self) -> List[Rule]:
        """Inline rules converted to domain rules."""
        return [record.to_rule() for record in self.availability]

    def get_rule_source(self, rules_file: Optional[Path] = None) -> RuleSourceProtocol:
        """
        Pick the rule source: an explicit file, then the configured file,
        then the inline rules.
        """
        path = rules_file or self.rules_file
        if path is not None:
            return JsonRuleSource(path)
        return StaticRuleSource(self.get_rules())


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
