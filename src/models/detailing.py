"""Cover, bar spacing and first-guess proportioning rules (ACI 318-19 Chapters 20 and 25)."""
from __future__ import annotations

import math
from enum import Enum

from src.models.rebar_catalog import BarSize


class MemberType(str, Enum):
    BEAM = "beam"
    COLUMN = "column"
    SLAB = "slab"
    ONE_WAY_SLAB = "one-way slab"
    TWO_WAY_SLAB = "two-way slab"
    JOIST = "joist"
    WALL = "wall"
    WALL_BOUNDARY_ELEMENT = "wall boundary element"
    RETAINING_WALL = "retaining wall"
    PEDESTAL = "pedestal"
    TENSION_TIE = "tension tie"
    STRUT = "strut"


class ReinforcementType(str, Enum):
    LONGITUDINAL = "longitudinal"
    STIRRUP = "stirrup"
    TIE = "tie"
    SPIRAL = "spiral"
    HOOP = "hoop"


# Members covered by the "slabs, joists, and walls" rows of Table 20.5.1.3.2
_THIN_MEMBERS = {
    MemberType.SLAB,
    MemberType.ONE_WAY_SLAB,
    MemberType.TWO_WAY_SLAB,
    MemberType.JOIST,
    MemberType.WALL,
    MemberType.WALL_BOUNDARY_ELEMENT,
    MemberType.RETAINING_WALL,
}

# Longitudinal bars spaced per 25.2.3 rather than 25.2.1
_COMPRESSION_MEMBERS = {
    MemberType.COLUMN,
    MemberType.PEDESTAL,
    MemberType.STRUT,
    MemberType.WALL_BOUNDARY_ELEMENT,
}

MIN_VERTICAL_CLEAR_SPACING = 1.0  # in


def min_cover_cip(
    member_type: MemberType = MemberType.BEAM,
    reinforcement_type: ReinforcementType = ReinforcementType.LONGITUDINAL,
    cast_against_earth: bool = False,
    exposed: bool = False,
) -> tuple[float, str]:
    """
    Specified concrete cover for cast-in-place nonprestressed members.

    Args:
        member_type: Kind of member the bars are in.
        reinforcement_type: Primary reinforcement or transverse (stirrups, ties, spirals).
        cast_against_earth: Cast against and permanently in contact with ground.
        exposed: Exposed to weather or in contact with ground.

    Returns:
        (cover in inches, note citing ACI 318-19 Table 20.5.1.3.2)
    """
    member_type = MemberType(member_type)
    reinforcement_type = ReinforcementType(reinforcement_type)
    table = "ACI 318-19 Table 20.5.1.3.2"

    if cast_against_earth:
        return 3.0, f"3.0 in for concrete cast against and permanently in contact with ground ({table})"

    if exposed:
        if member_type in _THIN_MEMBERS:
            return 1.0, f"1.0 in for slabs, joists and walls exposed to weather ({table})"
        return 1.5, f"1.5 in for other members exposed to weather ({table})"

    if member_type in _THIN_MEMBERS:
        return 0.75, f"0.75 in for slabs, joists and walls not exposed to weather ({table})"
    if reinforcement_type is ReinforcementType.LONGITUDINAL:
        return 1.5, f"1.5 in for primary reinforcement in beams, columns and tension ties ({table})"
    return 1.0, f"1.0 in for stirrups, ties, spirals and hoops in beams, columns and tension ties ({table})"


def min_horizontal_clear_spacing(
    bar_size: BarSize | str,
    max_aggregate: float = 0.75,
    reinforcement_type: ReinforcementType = ReinforcementType.LONGITUDINAL,
    member_type: MemberType = MemberType.BEAM,
) -> tuple[float, str]:
    """
    Minimum clear spacing between parallel bars in a horizontal layer.

    25.2.1 (max of 1 in, db, 4/3 d_agg) applies to longitudinal bars in flexural members;
    25.2.3 (max of 1.5 in, 1.5 db, 4/3 d_agg) to columns, pedestals, struts and boundary
    elements, and is used for any other reinforcement type.
    """
    db = BarSize.parse(bar_size).diameter
    member_type = MemberType(member_type)
    reinforcement_type = ReinforcementType(reinforcement_type)
    aggregate_limit = 4.0 / 3.0 * max_aggregate

    if reinforcement_type is ReinforcementType.LONGITUDINAL and member_type not in _COMPRESSION_MEMBERS:
        spacing = max(1.0, db, aggregate_limit)
        return spacing, f"Min. horizontal clear spacing = {spacing:.3f} in per ACI 318-19 25.2.1"

    spacing = max(1.5, 1.5 * db, aggregate_limit)
    return spacing, f"Min. horizontal clear spacing = {spacing:.3f} in per ACI 318-19 25.2.3"


def min_vertical_clear_spacing() -> tuple[float, str]:
    """Clear distance between layers of parallel bars (ACI 318-19 25.2.2)."""
    return MIN_VERTICAL_CLEAR_SPACING, "Min. vertical clear spacing = 1.0 in per ACI 318-19 25.2.2"


def proportion_dimensions(span_ft: float, member_type: MemberType = MemberType.BEAM) -> tuple[float, float]:
    """
    First-guess (width, depth) in inches from common span rules of thumb.

    Beams and one-way slabs: depth L/20. Two-way slabs: L/30. Walls: height/25.
    Retaining walls: 0.1 H. Columns: length/40 square. Slabs and walls are sized per
    12 in strip.
    """
    if span_ft <= 0:
        raise ValueError(f"Span must be positive, got {span_ft}")
    span_in = span_ft * 12.0
    member_type = MemberType(member_type)

    if member_type is MemberType.BEAM:
        depth = math.ceil(span_in / 20.0)
        return float(math.ceil(0.4 * depth)), float(depth)
    if member_type is MemberType.ONE_WAY_SLAB:
        return 12.0, float(math.ceil(span_in / 20.0))
    if member_type is MemberType.TWO_WAY_SLAB:
        return 12.0, float(math.ceil(span_in / 30.0))
    if member_type is MemberType.WALL:
        return 12.0, float(math.ceil(span_in / 25.0))
    if member_type is MemberType.RETAINING_WALL:
        return 12.0, float(math.ceil(span_in * 0.1))
    if member_type is MemberType.COLUMN:
        side = float(math.ceil(span_in / 40.0))
        return side, side
    return 12.0, 12.0
