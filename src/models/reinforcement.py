from __future__ import annotations

import math
from dataclasses import dataclass

from src.models.rebar_catalog import Bar, BarSize

FIT_TOLERANCE = 1e-9  # in


@dataclass(frozen=True)
class RebarLayer:
    """A row of identical longitudinal bars at a depth measured from the compression face."""

    bar_size: BarSize
    quantity: int
    depth: float  # in, extreme compression fiber to layer centroid

    def __post_init__(self) -> None:
        object.__setattr__(self, "bar_size", BarSize.parse(self.bar_size))
        if int(self.quantity) != self.quantity or self.quantity <= 0:
            raise ValueError(f"Bar quantity must be a positive integer, got {self.quantity}")
        if self.depth <= 0:
            raise ValueError(f"Layer depth must be positive, got {self.depth}")

    @property
    def bar(self) -> Bar:
        return self.bar_size.bar

    @property
    def area(self) -> float:
        return self.quantity * self.bar.area

    def describe(self) -> str:
        return f"{self.quantity}-{self.bar_size} at {self.depth:g}"

    def to_dict(self) -> dict:
        return {
            "bar_size": self.bar_size.value,
            "quantity": self.quantity,
            "depth": self.depth,
            "diameter": self.bar.diameter,
            "area": self.area,
        }


@dataclass(frozen=True)
class StirrupLayer:
    """Stirrups of one size, leg count and spacing over a stretch of the member."""

    bar_size: BarSize
    legs: int
    spacing: float  # in
    start: float = 0.0
    end: float = math.inf

    def __post_init__(self) -> None:
        object.__setattr__(self, "bar_size", BarSize.parse(self.bar_size))
        if int(self.legs) != self.legs or self.legs <= 0:
            raise ValueError(f"Number of shear legs must be a positive integer, got {self.legs}")
        if self.spacing <= 0:
            raise ValueError(f"Stirrup spacing must be positive, got {self.spacing}")

    @property
    def bar(self) -> Bar:
        return self.bar_size.bar

    @property
    def Av(self) -> float:
        return self.legs * self.bar.area

    @property
    def Av_over_s(self) -> float:
        return self.Av / self.spacing

    def describe(self) -> str:
        return f"{self.legs}-leg {self.bar_size} @ {self.spacing:g}"

    def to_dict(self) -> dict:
        return {
            "bar_size": self.bar_size.value,
            "legs": self.legs,
            "spacing": self.spacing,
            "start": self.start,
            "end": None if math.isinf(self.end) else self.end,
            "Av": self.Av,
        }


def layer_footprint(bar_size: BarSize | str, quantity: int, clear_spacing: float) -> float:
    """Width taken up by a row of bars: n*db + (n-1)*clear spacing."""
    diameter = BarSize.parse(bar_size).diameter
    return quantity * diameter + (quantity - 1) * clear_spacing


def fits_in_width(width: float, bar_size: BarSize | str, quantity: int,
                  clear_spacing: float, side_cover: float) -> bool:
    """Horizontal fit check; a footprint exactly equal to the width is accepted."""
    required = layer_footprint(bar_size, quantity, clear_spacing) + 2 * side_cover
    return required <= width + FIT_TOLERANCE
