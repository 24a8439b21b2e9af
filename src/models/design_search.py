"""
Design-space search for rectangular beam sections.

Widths fan out to a thread pool; every (width, height) pair is sized independently by
trying reinforcement in ascending steel area and keeping the first layout that reaches
the target moment while staying tension-controlled.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable

from src.models.aci_constants import EPSILON_T_TENSION, PHI_TENSION, WHITNEY_COEFF
from src.models.design_inputs import CoverConfig, MaterialProperties, SearchBounds, SpacingConfig
from src.models.errors import EmptyTensionSteelError, NoNeutralAxisError
from src.models.flexure import compute_flexural_capacity
from src.models.rebar_catalog import BarSize
from src.models.reinforcement import StirrupLayer
from src.models.result_types import DesignResult
from src.models.section import BeamSection
from src.models.shear import compute_shear_capacity, design_shear
from src.models.units import kipft_to_lbin, lbin_to_kipft

logger = logging.getLogger(__name__)

# Relative slack on pruning bounds so round-off never discards a borderline layout
PRUNE_SLACK = 1e-4

BarOption = tuple[BarSize, int]


def _option_area(option: BarOption) -> float:
    bar, qty = option
    return qty * bar.area


def _sorted_options(options: Iterable[BarOption]) -> list[BarOption]:
    return sorted(options, key=lambda opt: (_option_area(opt), opt[0].number, opt[1]))


def tension_options(section: BeamSection, bounds: SearchBounds) -> list[BarOption]:
    """Single-layer tension layouts that fit the width and provide As,min, ascending by area."""
    d = section.h - section.cover
    As_min = section.rho_min * section.b * d
    options = []
    for bar in bounds.tension_bar_sizes:
        for qty in range(1, bounds.max_tension_bars + 1):
            if not section.fits(bar, qty):
                continue
            if qty * bar.area < As_min:
                continue
            options.append((bar, qty))
    return _sorted_options(options)


def compression_options(section: BeamSection, bounds: SearchBounds) -> list[BarOption]:
    """Compression layouts that fit the width, ascending by area."""
    options = [
        (bar, qty)
        for bar in bounds.compression_bar_sizes
        for qty in range(1, bounds.max_compression_bars + 1)
        if section.fits(bar, qty)
    ]
    return _sorted_options(options)


def _ductile_concrete_force(section: BeamSection) -> float:
    """Largest concrete force compatible with epsilon_t >= 0.005 at the tension layer (lb)."""
    d = section.h - section.cover
    c_max = section.eps_cu * d / (section.eps_cu + EPSILON_T_TENSION)
    a = min(section.beta1 * c_max, section.h)
    return WHITNEY_COEFF * section.fc * section.b * a


def moment_upper_bound(section: BeamSection, compression: list[BarOption]) -> float:
    """
    Upper bound on phi*Mn (lb-in) for any tension-controlled layout of this geometry.

    The ductile stress block at c = 3/8 d plus the largest compression option at yield,
    both taken about the tension layer.
    """
    d = section.h - section.cover
    c_max = section.eps_cu * d / (section.eps_cu + EPSILON_T_TENSION)
    a = min(section.beta1 * c_max, section.h)
    Mn = WHITNEY_COEFF * section.fc * section.b * a * (d - a / 2)
    if compression:
        Mn += _option_area(compression[-1]) * section.fy * max(d - section.compression_cover, 0.0)
    return PHI_TENSION * Mn


def _tension_force_floor(section: BeamSection, As: float) -> float:
    """Smallest force tension steel of area As can carry once epsilon_t >= 0.005."""
    return As * min(EPSILON_T_TENSION * section.Es, section.fy)


def _evaluate(trial: BeamSection) -> DesignResult | None:
    try:
        return compute_flexural_capacity(trial)
    except (NoNeutralAxisError, EmptyTensionSteelError) as exc:
        logger.debug("Infeasible trial %r: %s", trial, exc)
        return None


def _accepts(result: DesignResult, Mu: float) -> bool:
    return result.phi_Mn >= Mu and result.epsilon_t >= EPSILON_T_TENSION


def _first_singly(base: BeamSection, tension: list[BarOption], Mu: float) -> DesignResult | None:
    Cc_max = _ductile_concrete_force(base)
    d = base.h - base.cover
    for bar, qty in tension:
        As = qty * bar.area
        if _tension_force_floor(base, As) > Cc_max * (1 + PRUNE_SLACK):
            break
        if PHI_TENSION * As * base.fy * d * (1 + PRUNE_SLACK) < Mu:
            continue
        trial = base.base_clone()
        trial.add_tension_layer(bar, qty)
        result = _evaluate(trial)
        if result is None:
            continue
        if result.epsilon_t < EPSILON_T_TENSION:
            # Strain only drops as a single layer grows
            logger.debug("b=%g h=%g: %d-%s fails ductility (epsilon_t=%.5f)",
                         base.b, base.h, qty, bar, result.epsilon_t)
            break
        if result.phi_Mn >= Mu:
            return result
    return None


def _first_doubly(base: BeamSection, tension: list[BarOption], compression: list[BarOption],
                  Mu: float) -> DesignResult | None:
    if not compression:
        return None
    Cc_max = _ductile_concrete_force(base)
    d = base.h - base.cover
    d_prime = base.compression_cover
    largest = _option_area(compression[-1])

    for t_bar, t_qty in tension:
        As = t_qty * t_bar.area
        # Compression steel must carry what the ductile concrete block cannot
        needed = (_tension_force_floor(base, As) - Cc_max * (1 + PRUNE_SLACK)) / base.fy
        if needed > largest:
            break
        for c_bar, c_qty in compression:
            As_prime = c_qty * c_bar.area
            if As_prime < needed:
                continue
            if PHI_TENSION * base.fy * (As * d + As_prime * d_prime) * (1 + PRUNE_SLACK) < Mu:
                continue
            trial = base.base_clone()
            trial.add_tension_layer(t_bar, t_qty)
            trial.add_compression_layer(c_bar, c_qty)
            result = _evaluate(trial)
            if result is not None and _accepts(result, Mu):
                return result
    return None


def _attach_shear(result: DesignResult, shear_demand: float | None, stirrup_bar: BarSize,
                  n_legs: int) -> DesignResult | None:
    section = result.section
    if shear_demand is None:
        return result.with_shear(compute_shear_capacity(section, []))

    shear = design_shear(section, shear_demand, stirrup_bar, n_legs)
    if shear.status_code == "error":
        logger.debug("b=%g h=%g dropped: %s", section.b, section.h, shear.status)
        return None
    stirrups = [] if shear.s_req is None else [StirrupLayer(stirrup_bar, n_legs, shear.s_req)]
    return result.with_shear(compute_shear_capacity(section, stirrups))


def design_section(
    b: float,
    h: float,
    Mu: float,
    materials: MaterialProperties,
    covers: CoverConfig,
    spacing: SpacingConfig,
    bounds: SearchBounds,
    shear_demand: float | None = None,
    stirrup_bar: BarSize | str = BarSize.N3,
    n_legs: int = 2,
) -> DesignResult | None:
    """
    Most economical accepted layout for one geometry, or None.

    Args:
        Mu: Target factored moment (lb-in).
        shear_demand: Factored shear (kips); None attaches the concrete-only capacity.
    """
    if h - covers.tension <= covers.compression:
        return None

    base = BeamSection(
        b, h, materials.fc, materials.fy, covers.tension,
        compression_cover=covers.compression,
        side_cover=covers.side,
        clear_spacing=spacing.clear_spacing,
        Es=materials.Es,
        eps_cu=materials.eps_cu,
    )
    tension = tension_options(base, bounds)
    if not tension:
        return None
    compression = compression_options(base, bounds)
    if moment_upper_bound(base, compression) * (1 + PRUNE_SLACK) < Mu:
        return None

    result = _first_singly(base, tension, Mu)
    if result is None:
        result = _first_doubly(base, tension, compression, Mu)
    if result is None:
        return None
    return _attach_shear(result, shear_demand, BarSize.parse(stirrup_bar), n_legs)


def _search_width(b: float, heights: list[float], Mu: float, **kwargs) -> list[DesignResult]:
    found = []
    for h in heights:
        result = design_section(b, h, Mu, **kwargs)
        if result is not None:
            found.append(result)
    return found


def design_all_sections(
    target_moment: float,
    materials: MaterialProperties | None = None,
    covers: CoverConfig | None = None,
    spacing: SpacingConfig | None = None,
    bounds: SearchBounds | None = None,
    shear_demand: float | None = None,
    stirrup_bar: BarSize | str = BarSize.N3,
    n_legs: int = 2,
    first_only: bool = False,
    max_workers: int | None = None,
    cancel_event: threading.Event | None = None,
) -> list[DesignResult]:
    """
    Every geometry within the bounds that can carry the target moment, smallest first.

    Args:
        target_moment: Factored moment Mu (kip-ft).
        materials, covers, spacing: Section configuration (defaults: 4000/60000 psi, 1.5 in).
        bounds: Widths, heights and bar options to try.
        shear_demand: Optional factored shear Vu (kips); designs that cannot take it are dropped.
        first_only: Return only the smallest design.
        max_workers: Thread pool size (None uses the executor default).
        cancel_event: Set it to stop the search; widths already finished are returned.

    Returns:
        DesignResult list sorted by (width, height); empty when nothing qualifies.
    """
    materials = materials or MaterialProperties()
    covers = covers or CoverConfig()
    spacing = spacing or SpacingConfig()
    bounds = bounds or SearchBounds()
    cancel_event = cancel_event or threading.Event()
    stirrup_bar = BarSize.parse(stirrup_bar)

    Mu = kipft_to_lbin(target_moment)
    widths = bounds.widths
    heights = bounds.heights
    logger.info("Design search: Mu=%.2f kip-ft over %d widths x %d heights",
                lbin_to_kipft(Mu), len(widths), len(heights))

    results: list[DesignResult] = []
    lock = threading.Lock()
    completed = 0

    def run_width(b: float) -> None:
        nonlocal completed
        if cancel_event.is_set():
            return
        found = _search_width(
            b, heights, Mu,
            materials=materials,
            covers=covers,
            spacing=spacing,
            bounds=bounds,
            shear_demand=shear_demand,
            stirrup_bar=stirrup_bar,
            n_legs=n_legs,
        )
        with lock:
            results.extend(found)
            completed += 1

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(run_width, b) for b in widths]
        for future in as_completed(futures):
            future.result()

    if cancel_event.is_set():
        logger.warning("Design search cancelled after %d of %d widths", completed, len(widths))

    ordered = sort_designs(results)
    logger.info("Design search finished: %d designs found", len(ordered))
    if first_only:
        return ordered[:1]
    return ordered


# Result-list filters

def _bar_signature(result: DesignResult) -> tuple[float, ...]:
    layers = sorted(result.section.tension_layers, key=lambda layer: layer.depth)
    return tuple(layer.bar.diameter for layer in layers)


def unique_by_depth(designs: Iterable[DesignResult]) -> list[DesignResult]:
    """Keep the shallowest design per (width, tension bar diameters)."""
    best: dict[tuple, DesignResult] = {}
    for result in designs:
        key = (result.width, _bar_signature(result))
        if key not in best or result.height < best[key].height:
            best[key] = result
    return sort_designs(best.values())


def unique_by_width(designs: Iterable[DesignResult]) -> list[DesignResult]:
    """Keep the narrowest design per (height, tension bar diameters)."""
    best: dict[tuple, DesignResult] = {}
    for result in designs:
        key = (result.height, _bar_signature(result))
        if key not in best or result.width < best[key].width:
            best[key] = result
    return sort_designs(best.values())


def filter_designs(designs: Iterable[DesignResult], width: float | None = None,
                   max_bar: BarSize | str | None = None) -> list[DesignResult]:
    """Keep designs of the given width and with no bar larger than max_bar."""
    limit = BarSize.parse(max_bar).diameter if max_bar is not None else None
    kept = []
    for result in designs:
        if width is not None and result.width != width:
            continue
        if limit is not None:
            layers = result.section.tension_layers + result.section.compression_layers
            if any(layer.bar.diameter > limit for layer in layers):
                continue
        kept.append(result)
    return kept


def sort_designs(designs: Iterable[DesignResult], by_area: bool = False) -> list[DesignResult]:
    """Sort by (width, height), or by (gross area, tension steel) when by_area is set."""
    if by_area:
        return sorted(designs, key=lambda r: (r.gross_area, r.As_tension, r.width, r.height))
    return sorted(designs, key=lambda r: (r.width, r.height))
