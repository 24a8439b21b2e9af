from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from src.models.aci_constants import EPSILON_CU, ES_STEEL
from src.models.detailing import MemberType, ReinforcementType, min_horizontal_clear_spacing
from src.models.rebar_catalog import BEAM_BAR_SIZES, BarSize


@dataclass
class MaterialProperties:
    fc: float = 4000.0      # psi
    fy: float = 60000.0     # psi
    Es: float = ES_STEEL    # psi
    eps_cu: float = EPSILON_CU

    def __post_init__(self) -> None:
        if self.fc <= 0 or self.fy <= 0 or self.Es <= 0 or self.eps_cu <= 0:
            raise ValueError(f"Material properties must be positive: {self}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CoverConfig:
    """Distances (in) from the faces to the bar centroids (tension, compression) and to the outer bar (side)."""

    tension: float = 1.5
    compression: float = 1.5
    side: float = 1.5

    def __post_init__(self) -> None:
        if self.tension <= 0 or self.compression <= 0:
            raise ValueError(f"Tension and compression covers must be positive: {self}")
        if self.side < 0:
            raise ValueError(f"Side cover must not be negative: {self}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SpacingConfig:
    clear_spacing: float = 1.5   # in, between bars of one layer

    def __post_init__(self) -> None:
        if self.clear_spacing < 0:
            raise ValueError(f"Clear spacing must not be negative, got {self.clear_spacing}")

    @classmethod
    def for_bar(cls, bar_size: BarSize | str, max_aggregate: float = 0.75,
                member_type: MemberType = MemberType.BEAM) -> SpacingConfig:
        """Clear spacing from the ACI 318-19 25.2 minimum for the given bar and aggregate."""
        spacing, _ = min_horizontal_clear_spacing(bar_size, max_aggregate,
                                                  ReinforcementType.LONGITUDINAL, member_type)
        return cls(clear_spacing=spacing)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SearchBounds:
    min_width: float = 4.0
    max_width: float = 35.0
    min_height: float = 4.0
    max_height: float = 35.0
    step: float = 1.0
    tension_bar_sizes: tuple[BarSize, ...] = BEAM_BAR_SIZES
    max_tension_bars: int = 4
    compression_bar_sizes: tuple[BarSize, ...] = BEAM_BAR_SIZES
    max_compression_bars: int = 4

    def __post_init__(self) -> None:
        if self.step <= 0:
            raise ValueError(f"Search step must be positive, got {self.step}")
        if self.min_width <= 0 or self.min_height <= 0:
            raise ValueError("Search bounds must be positive")
        if self.min_width > self.max_width or self.min_height > self.max_height:
            raise ValueError("Minimum search bound exceeds maximum")
        if self.max_tension_bars < 1 or self.max_compression_bars < 0:
            raise ValueError("Bar count limits must allow at least one tension bar")
        self.tension_bar_sizes = tuple(BarSize.parse(size) for size in self.tension_bar_sizes)
        self.compression_bar_sizes = tuple(BarSize.parse(size) for size in self.compression_bar_sizes)

    @property
    def widths(self) -> list[float]:
        return _frange(self.min_width, self.max_width, self.step)

    @property
    def heights(self) -> list[float]:
        return _frange(self.min_height, self.max_height, self.step)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["tension_bar_sizes"] = [size.value for size in self.tension_bar_sizes]
        data["compression_bar_sizes"] = [size.value for size in self.compression_bar_sizes]
        return data


@dataclass
class DesignInputs:
    mu: float = 100.0            # kip-ft
    vu: float = 50.0             # kips
    n_legs: int = 2
    stirrup_bar: str = "#3"
    materials: MaterialProperties = field(default_factory=MaterialProperties)
    covers: CoverConfig = field(default_factory=CoverConfig)
    spacing: SpacingConfig = field(default_factory=SpacingConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _frange(start: float, stop: float, step: float) -> list[float]:
    count = int(round((stop - start) / step + 1e-9)) + 1
    return [start + i * step for i in range(count) if start + i * step <= stop + 1e-9]
