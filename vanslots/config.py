"""
Configuration management using Pydantic Settings.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.booking_rules import BookingRules, DriverAgePolicy
from .domain.models import PricingTier


class DriverAgeConfig(BaseModel):
    """Accepted driver age range."""
    minimum: int = 21
    maximum: int = 80

    @model_validator(mode="after")
    def validate_order(self) -> "DriverAgeConfig":
        """Ensure the minimum age is below the maximum."""
        if self.minimum >= self.maximum:
            raise ValueError("driver_age.minimum must be lower than driver_age.maximum")
        return self

    def to_policy(self) -> DriverAgePolicy:
        return DriverAgePolicy(minimum=self.minimum, maximum=self.maximum)


class TierConfig(BaseModel):
    """One pricing tier of a vehicle category."""
    min_days: int = Field(ge=0)
    max_days: int = Field(ge=0)
    price_per_day: float = Field(ge=0)

    def to_tier(self) -> PricingTier:
        return PricingTier(
            min_days=self.min_days,
            max_days=self.max_days,
            price_per_day=self.price_per_day,
        )


class PricingConfig(BaseModel):
    """Default category pricing used by the ``quote`` command."""
    tiers: List[TierConfig] = Field(default_factory=list)
    extra_hours_rate: float = Field(default=0, ge=0)


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/London"
    slot_interval_minutes: int = 15
    same_day_min_hours: int = 6
    driver_age: DriverAgeConfig = Field(default_factory=DriverAgeConfig)
    api_base_url: Optional[str] = None
    request_timeout_seconds: float = 10
    offices_file: Optional[Path] = None
    reservations_file: Optional[Path] = None
    pricing: PricingConfig = Field(default_factory=PricingConfig)

    @field_validator("slot_interval_minutes")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        """Slots must tile an hour evenly."""
        if value <= 0 or 60 % value != 0:
            raise ValueError(f"slot_interval_minutes must divide 60, got {value}")
        return value

    @field_validator("same_day_min_hours")
    @classmethod
    def validate_min_hours(cls, value: int) -> int:
        if not 0 <= value <= 24:
            raise ValueError(f"same_day_min_hours must be between 0 and 24, got {value}")
        return value

    def booking_rules(self) -> BookingRules:
        return BookingRules(
            same_day_min_hours=self.same_day_min_hours,
            driver_age=self.driver_age.to_policy(),
        )

    def pricing_tiers(self) -> List[PricingTier]:
        return [tier.to_tier() for tier in self.pricing.tiers]

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
        return config.with_paths_relative_to(config_path.parent)

    def with_paths_relative_to(self, base_dir: Path) -> "AppConfig":
        """Resolve relative data file paths against the config file's directory."""
        updates = {}
        for name in ("offices_file", "reservations_file"):
            value: Optional[Path] = getattr(self, name)
            if value is not None and not value.is_absolute():
                updates[name] = base_dir / value
        return self.model_copy(update=updates)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of vanslots/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
