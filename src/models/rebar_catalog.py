"""Standard ASTM A615 bar sizes (ACI 318-19 Appendix A)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.models.errors import InvalidBarSizeError


@dataclass(frozen=True)
class Bar:
    designation: str
    diameter: float  # in
    area: float      # in^2
    weight: float    # plf


class BarSize(str, Enum):
    N3 = "#3"
    N4 = "#4"
    N5 = "#5"
    N6 = "#6"
    N7 = "#7"
    N8 = "#8"
    N9 = "#9"
    N10 = "#10"
    N11 = "#11"
    N14 = "#14"
    N18 = "#18"

    @classmethod
    def parse(cls, value: BarSize | str) -> BarSize:
        """Resolve a designation such as '#8' (or '8') to a catalog entry."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        if not text.startswith("#"):
            text = f"#{text}"
        try:
            return cls(text)
        except ValueError:
            valid = ", ".join(size.value for size in cls)
            raise InvalidBarSizeError(f"Unknown bar size: {value!r} (valid sizes: {valid})") from None

    @property
    def bar(self) -> Bar:
        return REBAR_TABLE[self]

    @property
    def number(self) -> int:
        return int(self.value[1:])

    @property
    def diameter(self) -> float:
        return REBAR_TABLE[self].diameter

    @property
    def area(self) -> float:
        return REBAR_TABLE[self].area

    def __str__(self) -> str:
        return self.value


REBAR_TABLE: dict[BarSize, Bar] = {
    BarSize.N3: Bar("#3", 0.375, 0.11, 0.376),
    BarSize.N4: Bar("#4", 0.500, 0.20, 0.668),
    BarSize.N5: Bar("#5", 0.625, 0.31, 1.043),
    BarSize.N6: Bar("#6", 0.750, 0.44, 1.502),
    BarSize.N7: Bar("#7", 0.875, 0.60, 2.044),
    BarSize.N8: Bar("#8", 1.000, 0.79, 2.670),
    BarSize.N9: Bar("#9", 1.128, 1.00, 3.400),
    BarSize.N10: Bar("#10", 1.270, 1.27, 4.303),
    BarSize.N11: Bar("#11", 1.410, 1.56, 5.313),
    BarSize.N14: Bar("#14", 1.693, 2.25, 7.650),
    BarSize.N18: Bar("#18", 2.257, 4.00, 13.60),
}

# Sizes normally used for beam flexural steel and for stirrups
BEAM_BAR_SIZES = (
    BarSize.N3, BarSize.N4, BarSize.N5, BarSize.N6, BarSize.N7,
    BarSize.N8, BarSize.N9, BarSize.N10, BarSize.N11,
)
STIRRUP_BAR_SIZES = (BarSize.N3, BarSize.N4, BarSize.N5)


def get_bar(designation: BarSize | str) -> Bar:
    """Return the catalog entry for a designation, failing on unknown sizes."""
    return REBAR_TABLE[BarSize.parse(designation)]
