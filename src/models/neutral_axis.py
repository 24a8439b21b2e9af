"""Neutral axis depth from force equilibrium (strain compatibility, ACI 318-19 22.2)."""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable, Sequence

from src.models.aci_constants import WHITNEY_COEFF
from src.models.result_types import NeutralAxisResult, TraceCheck

if TYPE_CHECKING:
    from src.models.section import BeamSection

logger = logging.getLogger(__name__)

NA_SAMPLE_COUNT = 250      # samples of F(c) across the search domain
NA_TOLERANCE = 1e-6        # bisection interval width (in)
NA_DOMAIN_FACTOR = 5.0     # upper bound of the domain as a multiple of h
NA_MIN_DEPTH = 1e-6        # lower bound of the domain (in)
NA_MAX_BISECTIONS = 200


def layer_strain(depth: float, c: float, eps_cu: float) -> float:
    """Strain at a depth for a linear profile with eps_cu at the top fiber (tension positive)."""
    return eps_cu * (depth - c) / c


def steel_stress(strain: float, Es: float, fy: float) -> float:
    """Elastic-perfectly plastic steel stress, same sign as the strain."""
    return math.copysign(min(abs(strain * Es), fy), strain)


def stress_block_depth(c: float, beta1: float, h: float) -> float:
    """Whitney block depth a = beta1 * c, limited to the section height."""
    return min(beta1 * c, h)


def build_axial_force_function(
    *,
    b: float,
    h: float,
    fc: float,
    beta1: float,
    fy: float,
    Es: float,
    eps_cu: float,
    layers: Sequence[tuple[float, float]],
) -> Callable[[float], float]:
    """
    Return F(c) = C_concrete + sum(C_compression) - sum(T_tension) for the given coefficients.

    Args:
        layers: (As, depth) pairs for every steel layer, tension and compression alike.
            A layer's role follows from its strain at c, not from how it was entered.
    """
    steel = tuple((float(As), float(depth)) for As, depth in layers)

    def net_force(c: float) -> float:
        Cc = WHITNEY_COEFF * fc * b * stress_block_depth(c, beta1, h)
        tension = 0.0
        for As, depth in steel:
            tension += As * steel_stress(layer_strain(depth, c, eps_cu), Es, fy)
        return Cc - tension

    return net_force


def section_force_function(section: BeamSection) -> Callable[[float], float]:
    layers = [(layer.area, layer.depth) for layer in section.tension_layers]
    layers += [(layer.area, layer.depth) for layer in section.compression_layers]
    return build_axial_force_function(
        b=section.b,
        h=section.h,
        fc=section.fc,
        beta1=section.beta1,
        fy=section.fy,
        Es=section.Es,
        eps_cu=section.eps_cu,
        layers=layers,
    )


def find_sign_changes(func: Callable[[float], float], lower: float, upper: float,
                      samples: int) -> list[tuple[float, float]]:
    """Sample func on [lower, upper] and return every bracket where its sign changes.

    A sample that is exactly zero is returned as a degenerate bracket (x, x).
    """
    step = (upper - lower) / (samples - 1)
    brackets: list[tuple[float, float]] = []
    x_prev = lower
    f_prev = func(x_prev)
    if f_prev == 0.0:
        brackets.append((x_prev, x_prev))
    for i in range(1, samples):
        x = lower + i * step
        f = func(x)
        if f == 0.0:
            brackets.append((x, x))
        elif f_prev != 0.0 and (f_prev < 0.0) != (f < 0.0):
            brackets.append((x_prev, x))
        x_prev, f_prev = x, f
    return brackets


def bisect(func: Callable[[float], float], lo: float, hi: float,
           tol: float = NA_TOLERANCE) -> tuple[float, int]:
    """Refine a sign-change bracket by bisection. Returns (root, iterations)."""
    if lo == hi:
        return lo, 0
    f_lo = func(lo)
    iterations = 0
    while hi - lo > tol and iterations < NA_MAX_BISECTIONS:
        mid = 0.5 * (lo + hi)
        f_mid = func(mid)
        iterations += 1
        if f_mid == 0.0:
            return mid, iterations
        if (f_lo < 0.0) == (f_mid < 0.0):
            lo, f_lo = mid, f_mid
        else:
            hi = mid
    return 0.5 * (lo + hi), iterations


def solve_neutral_axis(
    section: BeamSection,
    samples: int = NA_SAMPLE_COUNT,
    tol: float = NA_TOLERANCE,
    domain_factor: float = NA_DOMAIN_FACTOR,
) -> NeutralAxisResult:
    """
    Find the neutral axis depth c that zeroes the net axial force.

    Every sign change of F(c) on [NA_MIN_DEPTH, domain_factor * h] is refined
    independently and the smallest positive root is reported. When F never changes
    sign the result carries status_code "no_root" and c is None.
    """
    net_force = section_force_function(section)
    lower = NA_MIN_DEPTH
    upper = domain_factor * section.h
    brackets = find_sign_changes(net_force, lower, upper, samples)

    trace: list[TraceCheck] = []
    if not brackets:
        logger.debug("No sign change of F(c) on [%.2e, %.2f] for %r", lower, upper, section)
        trace.append(
            TraceCheck(
                code_ref="ACI 318-19 Section 22.2.1",
                formula_id="neutral_axis_no_root",
                inputs={"c_lower_in": lower, "c_upper_in": upper, "samples": float(samples)},
                value=net_force(upper),
                units="lb",
                status="error",
                note="Net axial force does not change sign in the sampled domain.",
            )
        )
        return NeutralAxisResult(
            status="Error: No neutral axis found (no sign change of net force)",
            status_code="no_root",
            trace=trace,
        )

    roots: list[float] = []
    iterations = 0
    for lo, hi in brackets:
        root, used = bisect(net_force, lo, hi, tol)
        iterations += used
        if root > 0:
            roots.append(root)
    roots.sort()
    c = roots[0]
    residual = net_force(c)

    if len(roots) > 1:
        logger.debug("Multiple equilibrium roots %s; using smallest c=%.5f", roots, c)
    logger.debug("Neutral axis c=%.5f in after %d bisections (residual %.3e lb)", c, iterations, residual)

    trace.append(
        TraceCheck(
            code_ref="ACI 318-19 Section 22.2.1",
            formula_id="neutral_axis_equilibrium",
            inputs={"c_lower_in": lower, "c_upper_in": upper, "roots": float(len(roots))},
            value=c,
            units="in",
            status="ok",
        )
    )
    return NeutralAxisResult(
        status="OK",
        status_code="ok",
        c=c,
        roots=roots,
        iterations=iterations,
        residual=residual,
        trace=trace,
    )
