"""Terrain generation configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

from ..noise import NoiseConfig


class Range(BaseModel):
    """Closed interval [min, max]."""

    min: float = Field(default=0.0, description="Lower bound (inclusive)")
    max: float = Field(default=1.0, description="Upper bound (inclusive)")

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def distance(self, value: float) -> float:
        """Distance from value to the nearest bound."""
        return min(abs(value - self.min), abs(value - self.max))


class Color(BaseModel):
    """RGB display color."""

    r: int = 0
    g: int = 0
    b: int = 0


class VegetationCondition(BaseModel):
    """Inclusive bound on a point property."""

    property: Literal["elevation", "temperature", "humidity", "slope"]
    min: float
    max: float


class VegetationRule(BaseModel):
    """Vegetation spawned on cells of a biome."""

    type: str
    density: float = Field(default=1.0, description="Mean instance count per cell")
    min_size: float = Field(default=1.0, description="Minimum instance size")
    max_size: float = Field(default=1.0, description="Maximum instance size")
    probability: float = Field(default=1.0, description="Chance a cell spawns any")
    conditions: list[VegetationCondition] = Field(default_factory=list)


class StructureSize(BaseModel):
    """Structure footprint."""

    width: float = 1.0
    height: float = 1.0
    depth: float = 1.0


class StructureCondition(BaseModel):
    """Predicate on a point for structure placement."""

    property: Literal["elevation", "biome", "proximity"]
    value: float | str
    operator: Literal["equals", "greater", "less", "contains"] = "equals"


class StructureRule(BaseModel):
    """Structure spawned on cells of a biome."""

    type: str
    probability: float = Field(default=1.0, description="Chance per eligible cell")
    min_distance: float = Field(
        default=0.0, description="Minimum distance to any other structure"
    )
    size: StructureSize = Field(default_factory=StructureSize)
    conditions: list[StructureCondition] = Field(default_factory=list)


class BiomeDefinition(BaseModel):
    """Named region of (elevation, temperature, humidity) space."""

    id: str
    name: str
    elevation: Range = Field(default_factory=Range)
    temperature: Range = Field(default_factory=lambda: Range(min=-1.0, max=1.0))
    humidity: Range = Field(default_factory=lambda: Range(min=-1.0, max=1.0))
    color: Color = Field(default_factory=Color)
    vegetation: list[VegetationRule] = Field(default_factory=list)
    structures: list[StructureRule] = Field(default_factory=list)


class ErosionSettings(BaseModel):
    """Droplet erosion parameters."""

    iterations: int = Field(default=1, description="Full droplet passes over the map")
    evaporation_rate: float = Field(
        default=0.1, description="Share of water lost per droplet step"
    )
    sediment_capacity: float = Field(
        default=4.0, description="Carrying capacity multiplier"
    )
    erosion_radius: int = Field(
        default=1, description="Brush radius (not read; droplets only touch their own cell)"
    )
    erosion_speed: float = Field(default=0.3, description="Max sediment picked up per step")
    deposition_speed: float = Field(default=0.3, description="Share of excess deposited")


class TerrainConfig(BaseModel):
    """Complete terrain generation configuration."""

    width: int = Field(default=64, description="Map width in cells")
    height: int = Field(default=64, description="Map height in cells")
    scale: float = Field(
        default=1.0, description="World units per cell (carried in exports, not read by generation)"
    )
    height_multiplier: float = Field(
        default=1.0, description="Elevation of a fully normalized peak"
    )
    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    biomes: list[BiomeDefinition] = Field(default_factory=list)
    erosion: ErosionSettings | None = Field(
        default=None, description="Erosion pass settings (None = disabled)"
    )
