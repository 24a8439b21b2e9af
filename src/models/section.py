from __future__ import annotations

import math
from typing import Iterable

from src.models.aci_constants import (
    BETA1_HIGH,
    BETA1_LOW,
    BETA1_STEP,
    EPSILON_CU,
    ES_STEEL,
    FC_BETA1_LOWER,
    FC_BETA1_UPPER,
    MIN_RHO_COEFF_1,
    MIN_RHO_COEFF_2,
    NOMINAL_BAR_DIAMETER,
    RHO_MAX_FACTOR,
    WHITNEY_COEFF,
)
from src.models.rebar_catalog import BarSize
from src.models.reinforcement import RebarLayer, StirrupLayer, fits_in_width


def compute_beta1(fc: float) -> float:
    """Stress block factor beta1 (ACI 318-19 Table 22.2.2.4.3), fc in psi."""
    if fc <= FC_BETA1_UPPER:
        return BETA1_HIGH
    if fc < FC_BETA1_LOWER:
        return BETA1_HIGH - BETA1_STEP * (fc - FC_BETA1_UPPER) / 1000
    return BETA1_LOW


class BeamSection:
    def __init__(self, b: float, h: float, fc: float = 4000.0, fy: float = 60000.0,
                 cover: float = 1.5, compression_cover: float | None = None,
                 side_cover: float | None = None, clear_spacing: float = 1.5,
                 Es: float = ES_STEEL, eps_cu: float = EPSILON_CU) -> None:
        """
        Initialize the BeamSection with material and geometric properties.

        Args:
            b: Width of the beam (in)
            h: Total height of the beam (in)
            fc: Concrete compressive strength (psi)
            fy: Steel yield strength (psi)
            cover: Tension cover, bottom face to centroid of the tension layer (in)
            compression_cover: Top face to centroid of the compression layer (in), defaults to cover
            side_cover: Side face to the outermost bar (in), defaults to cover
            clear_spacing: Minimum clear spacing between bars in a layer (in)
            Es: Steel modulus (psi)
            eps_cu: Ultimate concrete strain
        """
        compression_cover = cover if compression_cover is None else compression_cover
        side_cover = cover if side_cover is None else side_cover

        # Validation
        if b <= 0 or h <= 0:
            raise ValueError(f"Width and height must be positive (b={b}, h={h})")
        if cover >= h or compression_cover >= h:
            raise ValueError(f"Cover ({max(cover, compression_cover)} in) must be less than beam height ({h} in)")
        if cover < 0 or compression_cover < 0 or side_cover < 0 or clear_spacing < 0:
            raise ValueError("Cover and clear spacing must not be negative")
        if fc <= 0 or fy <= 0 or Es <= 0:
            raise ValueError(f"Material strengths must be positive (fc={fc}, fy={fy}, Es={Es})")
        if eps_cu <= 0:
            raise ValueError(f"Ultimate concrete strain must be positive, got {eps_cu}")

        self.b = b
        self.h = h
        self.fc = fc
        self.fy = fy
        self.Es = Es
        self.eps_cu = eps_cu
        self.cover = cover
        self.compression_cover = compression_cover
        self.side_cover = side_cover
        self.clear_spacing = clear_spacing
        self.beta1 = compute_beta1(fc)

        self._tension_layers: list[RebarLayer] = []
        self._compression_layers: list[RebarLayer] = []
        self._stirrup_layers: list[StirrupLayer] = []

    # Reinforcement
    @property
    def tension_layers(self) -> tuple[RebarLayer, ...]:
        return tuple(self._tension_layers)

    @property
    def compression_layers(self) -> tuple[RebarLayer, ...]:
        return tuple(self._compression_layers)

    @property
    def stirrup_layers(self) -> tuple[StirrupLayer, ...]:
        return tuple(self._stirrup_layers)

    def _check_depth(self, depth: float) -> None:
        if not 0 < depth < self.h:
            raise ValueError(f"Layer depth must lie inside the section (0 < {depth} < {self.h})")

    def add_tension_layer(self, bar_size: BarSize | str, quantity: int,
                          depth: float | None = None) -> RebarLayer:
        """Append a tension layer; depth defaults to h - cover."""
        depth = self.h - self.cover if depth is None else depth
        self._check_depth(depth)
        layer = RebarLayer(BarSize.parse(bar_size), quantity, depth)
        self._tension_layers.append(layer)
        return layer

    def add_compression_layer(self, bar_size: BarSize | str, quantity: int,
                              depth: float | None = None) -> RebarLayer:
        """Append a compression layer; depth defaults to the compression cover."""
        depth = self.compression_cover if depth is None else depth
        self._check_depth(depth)
        layer = RebarLayer(BarSize.parse(bar_size), quantity, depth)
        self._compression_layers.append(layer)
        return layer

    def add_stirrups(self, bar_size: BarSize | str, legs: int, spacing: float,
                     start: float = 0.0, end: float = math.inf) -> StirrupLayer:
        layer = StirrupLayer(BarSize.parse(bar_size), legs, spacing, start, end)
        self._stirrup_layers.append(layer)
        return layer

    def fits(self, bar_size: BarSize | str, quantity: int) -> bool:
        """True when a single row of bars fits across the width with side cover and clear spacing."""
        return fits_in_width(self.b, bar_size, quantity, self.clear_spacing, self.side_cover)

    def base_clone(self) -> BeamSection:
        """Copy geometry and materials without any reinforcement."""
        return BeamSection(
            self.b, self.h, self.fc, self.fy, self.cover,
            compression_cover=self.compression_cover,
            side_cover=self.side_cover,
            clear_spacing=self.clear_spacing,
            Es=self.Es,
            eps_cu=self.eps_cu,
        )

    def clone(self) -> BeamSection:
        """Copy the section with its own reinforcement lists."""
        other = self.base_clone()
        other._tension_layers = list(self._tension_layers)
        other._compression_layers = list(self._compression_layers)
        other._stirrup_layers = list(self._stirrup_layers)
        return other

    # Derived quantities
    @property
    def gross_area(self) -> float:
        return self.b * self.h

    @property
    def Ix(self) -> float:
        return self.b * self.h ** 3 / 12

    @property
    def Iy(self) -> float:
        return self.h * self.b ** 3 / 12

    @property
    def As_tension(self) -> float:
        return _total_area(self._tension_layers)

    @property
    def As_compression(self) -> float:
        return _total_area(self._compression_layers)

    @property
    def d(self) -> float:
        """Effective depth: area-weighted centroid of the tension layers."""
        if not self._tension_layers:
            return self.h - self.cover - NOMINAL_BAR_DIAMETER / 2
        return _centroid(self._tension_layers)

    @property
    def d_prime(self) -> float:
        """Depth to the centroid of the compression layers."""
        if not self._compression_layers:
            return self.compression_cover
        return _centroid(self._compression_layers)

    @property
    def d_t(self) -> float:
        """Depth to the extreme (deepest) tension layer."""
        if not self._tension_layers:
            return self.d
        return max(layer.depth for layer in self._tension_layers)

    @property
    def eps_y(self) -> float:
        return self.fy / self.Es

    def rho_at_strain(self, strain: float) -> float:
        """Steel ratio that puts the tension steel at the given strain when concrete crushes."""
        return (WHITNEY_COEFF * self.fc * self.beta1 / self.fy) * (self.eps_cu / (self.eps_cu + strain))

    @property
    def rho_balanced(self) -> float:
        return self.rho_at_strain(self.eps_y)

    @property
    def rho_max(self) -> float:
        return RHO_MAX_FACTOR * self.rho_balanced

    @property
    def rho_min(self) -> float:
        """Minimum flexural steel ratio (ACI 318-19 9.6.1.2)."""
        return max(MIN_RHO_COEFF_1 * math.sqrt(self.fc) / self.fy, MIN_RHO_COEFF_2 / self.fy)

    @property
    def As_min(self) -> float:
        return self.rho_min * self.b * self.d

    @property
    def rho(self) -> float:
        """Actual tension steel ratio As / (b * d)."""
        return self.As_tension / (self.b * self.d)

    # Display
    def tension_summary(self) -> str:
        return _layers_summary(self._tension_layers)

    def compression_summary(self) -> str:
        return _layers_summary(self._compression_layers)

    def summary(self) -> str:
        return f"{self.b:g} in. x {self.h:g} in. = {self.gross_area:g} sq. in."

    def to_dict(self) -> dict:
        return {
            "b": self.b,
            "h": self.h,
            "fc": self.fc,
            "fy": self.fy,
            "Es": self.Es,
            "eps_cu": self.eps_cu,
            "cover": self.cover,
            "compression_cover": self.compression_cover,
            "side_cover": self.side_cover,
            "clear_spacing": self.clear_spacing,
            "tension_layers": [layer.to_dict() for layer in self._tension_layers],
            "compression_layers": [layer.to_dict() for layer in self._compression_layers],
            "stirrup_layers": [layer.to_dict() for layer in self._stirrup_layers],
        }

    def __repr__(self) -> str:
        return (f"BeamSection(b={self.b}, h={self.h}, fc={self.fc}, fy={self.fy}, "
                f"tension=[{self.tension_summary()}], compression=[{self.compression_summary()}])")


def _total_area(layers: Iterable[RebarLayer]) -> float:
    return sum(layer.area for layer in layers)


def _centroid(layers: list[RebarLayer]) -> float:
    return sum(layer.area * layer.depth for layer in layers) / _total_area(layers)


def _layers_summary(layers: list[RebarLayer]) -> str:
    if not layers:
        return "None"
    return ", ".join(layer.describe() for layer in layers)
