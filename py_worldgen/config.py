"""Configuration management."""

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WORLDGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")

    # Generation defaults
    default_size: int = Field(default=256, description="Default grid side length")
    default_sea_level: float = Field(default=0.5, description="Default sea level")
    default_scale: float = Field(default=2.0, description="Default elevation noise frequency")
    default_octaves: int = Field(default=5, description="Default elevation octave count")
    default_territories: int = Field(default=8, description="Default number of territories")

    # Limits
    max_world_size: int = Field(default=4096, description="Maximum grid side length")


settings = Settings()


class WorldConfig(BaseModel):
    """Parameters for a single generation run. Validated once, then frozen."""

    model_config = ConfigDict(frozen=True)

    size: int = Field(default_factory=lambda: settings.default_size, gt=0, description="Grid side length")
    sea_level: float = Field(
        default_factory=lambda: settings.default_sea_level,
        gt=0.0,
        lt=1.0,
        description="Elevation below which a cell is ocean",
    )
    scale: float = Field(
        default_factory=lambda: settings.default_scale, gt=0.0, description="Elevation noise base frequency"
    )
    octaves: int = Field(default_factory=lambda: settings.default_octaves, ge=1, description="Elevation octaves")
    generate_territories: bool = Field(default=False, description="Grow territories after biomes")
    num_territories: int = Field(
        default_factory=lambda: settings.default_territories, ge=0, description="Number of territories"
    )
    territory_names: Optional[Tuple[str, ...]] = Field(
        default=None, description="Names for territories 1..num_territories"
    )
    seed: Optional[int] = Field(
        default=None,
        ge=-(2**63),
        le=2**64 - 1,
        description="Master seed; negative values map to their 64-bit two's complement",
    )

    @model_validator(mode="after")
    def _check_limits(self) -> "WorldConfig":
        if self.size > settings.max_world_size:
            raise ValueError(f"size {self.size} exceeds maximum of {settings.max_world_size}")
        if self.territory_names is not None and len(self.territory_names) > self.num_territories:
            raise ValueError(
                f"{len(self.territory_names)} territory names given for {self.num_territories} territories"
            )
        return self

    @classmethod
    def from_options(cls, **options: Any) -> "WorldConfig":
        """Build a config, reporting any invalid value as a ConfigurationError."""
        try:
            return cls(**options)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc
