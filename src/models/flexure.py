from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from src.models.aci_constants import (
    EPSILON_T_COMPRESSION,
    EPSILON_T_LOW_DUCTILITY,
    EPSILON_T_TENSION,
    PHI_COMPRESSION,
    PHI_TENSION,
    WHITNEY_COEFF,
)
from src.models.errors import EmptyTensionSteelError, NoNeutralAxisError
from src.models.neutral_axis import layer_strain, solve_neutral_axis, steel_stress, stress_block_depth
from src.models.result_types import DesignResult, DuctilityClass, LayerResponse, TraceCheck
from src.models.units import lbin_to_kipft

if TYPE_CHECKING:
    from src.models.reinforcement import RebarLayer
    from src.models.section import BeamSection

logger = logging.getLogger(__name__)

MOMENT_CHECK_RTOL = 1e-3


def compute_phi(epsilon_t: float) -> float:
    """Compute strength reduction factor based on net tensile strain."""
    if epsilon_t >= EPSILON_T_TENSION:
        return PHI_TENSION
    elif epsilon_t <= EPSILON_T_COMPRESSION:
        return PHI_COMPRESSION
    else:
        return PHI_COMPRESSION + (PHI_TENSION - PHI_COMPRESSION) * (epsilon_t - EPSILON_T_COMPRESSION) / (EPSILON_T_TENSION - EPSILON_T_COMPRESSION)


def classify_ductility(epsilon_t: float) -> DuctilityClass:
    if epsilon_t >= EPSILON_T_TENSION:
        return DuctilityClass.TENSION_CONTROLLED
    if epsilon_t <= EPSILON_T_COMPRESSION:
        return DuctilityClass.COMPRESSION_CONTROLLED
    return DuctilityClass.TRANSITION


def _layer_response(role: str, layer: RebarLayer, c: float, section: BeamSection) -> LayerResponse:
    strain = layer_strain(layer.depth, c, section.eps_cu)
    stress = steel_stress(strain, section.Es, section.fy)
    return LayerResponse(
        role=role,
        bar_size=layer.bar_size.value,
        quantity=layer.quantity,
        depth=layer.depth,
        area=layer.area,
        strain=strain,
        stress=stress,
        force=layer.area * stress,
        yielded=abs(strain) >= section.eps_y,
    )


def compute_flexural_capacity(section: BeamSection) -> DesignResult:
    """
    Nominal and design flexural strength of a section by strain compatibility.

    Args:
        section: The beam section with at least one tension layer.

    Returns:
        DesignResult with c, a, Mn (lb-in), phi, epsilon_t and advisory warnings.

    Raises:
        EmptyTensionSteelError: the section has no tension reinforcement.
        NoNeutralAxisError: the equilibrium solver found no root.
    """
    if not section.tension_layers:
        raise EmptyTensionSteelError("Flexural capacity requires at least one tension reinforcement layer")

    # The result keeps its own copy; later edits to the caller's section do not leak into it
    section = section.clone()
    logger.debug("Flexure capacity: b=%.1f h=%.1f As=%.2f As'=%.2f",
                 section.b, section.h, section.As_tension, section.As_compression)

    solution = solve_neutral_axis(section)
    if not solution.ok:
        raise NoNeutralAxisError(solution.status, solution)

    c = solution.c
    trace: list[TraceCheck] = list(solution.trace)
    warnings: list[str] = []

    a = stress_block_depth(c, section.beta1, section.h)
    Cc = WHITNEY_COEFF * section.fc * section.b * a
    layers = [_layer_response("tension", layer, c, section) for layer in section.tension_layers]
    layers += [_layer_response("compression", layer, c, section) for layer in section.compression_layers]

    # Moments with tension-positive layer forces
    d_t = section.d_t
    Mn_top = sum(item.force * item.depth for item in layers) - Cc * a / 2
    Mn_tension = Cc * (d_t - a / 2) - sum(item.force * (d_t - item.depth) for item in layers)
    Mn = Mn_top

    if not math.isclose(Mn_top, Mn_tension, rel_tol=MOMENT_CHECK_RTOL):
        logger.warning("Moment cross-check mismatch: top fiber %.1f vs tension layer %.1f lb-in",
                       Mn_top, Mn_tension)
        trace.append(
            TraceCheck(
                code_ref="Equilibrium check",
                formula_id="Mn_cross_check",
                inputs={"Mn_top_lbin": Mn_top, "Mn_tension_lbin": Mn_tension},
                value=Mn_top - Mn_tension,
                units="lb-in",
                status="warning",
                note="Moments about the top fiber and the extreme tension layer differ.",
            )
        )

    epsilon_t = -section.eps_cu + (d_t / c) * section.eps_cu
    phi = compute_phi(epsilon_t)
    ductility = classify_ductility(epsilon_t)

    trace.append(
        TraceCheck(
            code_ref="ACI 318-19 Section 21.2.2",
            formula_id="phi_strain_classification",
            inputs={"epsilon_t": epsilon_t},
            value=phi,
            units="phi",
            status="ok" if ductility is DuctilityClass.TENSION_CONTROLLED else "warning",
        )
    )

    rho = section.rho
    rho_balanced = section.rho_balanced
    is_over_reinforced = rho > rho_balanced

    if is_over_reinforced:
        warnings.append(f"Over-reinforced: rho={rho:.5f} > rho_b={rho_balanced:.5f}")
    elif rho > section.rho_max:
        warnings.append(f"Steel ratio rho={rho:.5f} exceeds rho_max={section.rho_max:.5f}")
    if rho < section.rho_min:
        warnings.append(f"Below minimum steel: rho={rho:.5f} < rho_min={section.rho_min:.5f}")
    for item in layers:
        if item.role == "compression" and not item.yielded:
            warnings.append(f"Compression steel {item.quantity}-{item.bar_size} at {item.depth:g} has not yielded "
                            f"(fs={item.stress:.0f} psi)")
    if epsilon_t < EPSILON_T_LOW_DUCTILITY:
        warnings.append(f"Low ductility: epsilon_t={epsilon_t:.5f} < {EPSILON_T_LOW_DUCTILITY}")
    elif epsilon_t < EPSILON_T_TENSION:
        warnings.append(f"Transition zone: epsilon_t={epsilon_t:.5f} < {EPSILON_T_TENSION}")

    for message in warnings:
        logger.debug("Flexure advisory: %s", message)

    trace.append(
        TraceCheck(
            code_ref="ACI 318-19 Section 22.2",
            formula_id="phiMn",
            inputs={"c_in": c, "a_in": a, "Cc_lb": Cc, "phi": phi},
            value=phi * Mn,
            units="lb-in",
            status="ok",
        )
    )

    status = "OK"
    status_code = "ok"
    if warnings:
        status = f"Warning: {warnings[0]}"
        status_code = "warning"

    logger.debug("Flexure result: c=%.3f in, phiMn=%.1f kip-ft, epsilon_t=%.5f, phi=%.3f",
                 c, lbin_to_kipft(phi * Mn), epsilon_t, phi)

    return DesignResult(
        status=status,
        status_code=status_code,
        trace=trace,
        section=section,
        c=c,
        a=a,
        beta1=section.beta1,
        Mn=Mn,
        phi=phi,
        epsilon_t=epsilon_t,
        depth_to_epsilon_t=d_t,
        ductility_class=ductility,
        As_tension=section.As_tension,
        As_compression=section.As_compression,
        rho=rho,
        rho_balanced=rho_balanced,
        rho_min=section.rho_min,
        rho_max=section.rho_max,
        is_over_reinforced=is_over_reinforced,
        Mn_top=Mn_top,
        Mn_tension=Mn_tension,
        concrete_force=Cc,
        layers=layers,
        iterations=solution.iterations,
        roots=list(solution.roots),
        warnings=warnings,
    )
