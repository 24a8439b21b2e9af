from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Iterable

from src.models.aci_constants import (
    AV_MIN_COEFF_1,
    AV_MIN_COEFF_2,
    LAMBDA_NWC,
    PHI_SHEAR,
    S_MAX_HEAVY,
    S_MAX_NORMAL,
    S_MIN_PRACTICAL,
    VC_COEFF,
    VS_HALF_COEFF,
    VS_MAX_COEFF,
)
from src.models.rebar_catalog import BarSize
from src.models.result_types import ShearCapacityResult, ShearLayerResult, ShearResult, TraceCheck
from src.models.units import kip_to_lb, lb_to_kip
from src.models.validation import normalize_load_with_policy, validate_section_geometry

if TYPE_CHECKING:
    from src.models.reinforcement import StirrupLayer
    from src.models.section import BeamSection

logger = logging.getLogger(__name__)


def _compute_Vc(fc: float, b: float, d: float) -> float:
    """Concrete shear capacity Vc (simplified method), lb."""
    return VC_COEFF * LAMBDA_NWC * math.sqrt(fc) * b * d


def _compute_Vs_max(fc: float, b: float, d: float) -> float:
    return VS_MAX_COEFF * math.sqrt(fc) * b * d


def max_stirrup_spacing(b: float, d: float, fc: float, Vs_req: float) -> float:
    """Maximum stirrup spacing (ACI 318 Table 9.7.6.2.2), in."""
    if Vs_req <= VS_HALF_COEFF * math.sqrt(fc) * b * d:
        return min(d / 2, S_MAX_NORMAL)
    return min(d / 4, S_MAX_HEAVY)


def min_stirrup_spacing(stirrup_bar: BarSize | str = BarSize.N3) -> float:
    """Smallest practical stirrup spacing: 1 in clear between stirrups, never under 3 in."""
    return max(S_MIN_PRACTICAL, 1.0 + BarSize.parse(stirrup_bar).diameter)


def required_stirrup_spacing(Av: float, fy: float, d: float, Vs_req: float) -> float:
    """Spacing that develops Vs_req with stirrups of area Av; inf when no Vs is required."""
    if Vs_req <= 0:
        return math.inf
    return Av * fy * d / Vs_req


def av_min_spacing(Av: float, fy: float, b: float, fc: float) -> float:
    """Largest spacing that still provides Av,min (ACI 318 9.6.3.4)."""
    return min((Av * fy) / (AV_MIN_COEFF_1 * math.sqrt(fc) * b), (Av * fy) / (AV_MIN_COEFF_2 * b))


def _layer_shear(layer: StirrupLayer | None, Vc: float, Vs_max: float, fy: float,
                 d: float) -> tuple[ShearLayerResult, bool]:
    Vs = 0.0 if layer is None else layer.Av_over_s * fy * d
    capped = Vs > Vs_max
    Vs = min(Vs, Vs_max)
    Vn = Vc + Vs
    return ShearLayerResult(
        layer=layer,
        Vs=lb_to_kip(Vs),
        Vn=lb_to_kip(Vn),
        phi_Vn=lb_to_kip(PHI_SHEAR * Vn),
    ), capped


def compute_shear_capacity(section: BeamSection,
                           stirrup_layers: Iterable[StirrupLayer] | None = None) -> ShearCapacityResult:
    """
    Nominal and design shear strength of a rectangular section (ACI 318-19 Chapter 22).

    Args:
        section: The beam section object.
        stirrup_layers: Stirrup layers to evaluate; defaults to the section's own.

    Returns:
        ShearCapacityResult in kips; the section-level Vs, Vn and phi_Vn are those of the
        governing (weakest) layer.
    """
    layers = list(section.stirrup_layers if stirrup_layers is None else stirrup_layers)
    b = section.b
    d = section.d
    fc = section.fc
    fy = section.fy

    Vc = _compute_Vc(fc, b, d)
    Vs_max = _compute_Vs_max(fc, b, d)
    trace = [
        TraceCheck(
            code_ref="ACI 318-19 Section 22.5.5.1",
            formula_id="Vc_simplified",
            inputs={"fc_psi": fc, "bw_in": b, "d_in": d},
            value=Vc,
            units="lb",
            status="ok",
        ),
        TraceCheck(
            code_ref="ACI 318-19 Section 22.5.1.2",
            formula_id="Vs_max",
            inputs={"fc_psi": fc, "bw_in": b, "d_in": d},
            value=Vs_max,
            units="lb",
            status="ok",
        ),
    ]
    warnings: list[str] = []

    results: list[ShearLayerResult] = []
    for layer in layers or [None]:
        item, capped = _layer_shear(layer, Vc, Vs_max, fy, d)
        if capped:
            message = f"Stirrups {layer.describe()} exceed Vs_max; Vs limited to {lb_to_kip(Vs_max):.1f} kips"
            logger.warning(message)
            warnings.append(message)
        results.append(item)

    governing = min(results, key=lambda item: item.phi_Vn)
    trace.append(
        TraceCheck(
            code_ref="ACI 318-19 Section 22.5.1.1",
            formula_id="phiVn",
            inputs={"Vc_kip": lb_to_kip(Vc), "Vs_kip": governing.Vs},
            value=governing.phi_Vn,
            units="kip",
            status="warning" if warnings else "ok",
        )
    )

    return ShearCapacityResult(
        status="OK" if not warnings else f"Warning: {warnings[0]}",
        status_code="ok" if not warnings else "warning",
        trace=trace,
        Vc=lb_to_kip(Vc),
        Vs=governing.Vs,
        Vs_max=lb_to_kip(Vs_max),
        Vn=governing.Vn,
        phi=PHI_SHEAR,
        phi_Vn=governing.phi_Vn,
        d=d,
        layers=[item for item in results if item.layer is not None],
        warnings=warnings,
    )


def design_shear(section: BeamSection, Vu: float, stirrup_bar: BarSize | str = BarSize.N3,
                 n_legs: int = 2) -> ShearResult:
    """
    Calculate shear reinforcement (stirrups) per ACI 318-19 Simplified Method.

    Args:
        section: The beam section object.
        Vu: Ultimate Shear Force (kips).
        stirrup_bar: Stirrup bar designation.
        n_legs: Number of legs for stirrups (usually 2).

    Returns:
        ShearResult with Vc, phi_Vc, Vs_req (kips) and s_req, s_max, s_min (in)
    """
    logger.debug("Shear design: Vu=%.2f kips, b=%.1f d=%.1f", Vu, section.b, section.d)

    errors = validate_section_geometry(section)
    if errors:
        return ShearResult(
            status=f"Error: {' | '.join(errors)}",
            status_code="error",
        )

    Vu_norm, input_trace = normalize_load_with_policy(Vu, "Vu")
    trace: list[TraceCheck] = []
    if input_trace:
        trace.append(input_trace)

    bar = BarSize.parse(stirrup_bar)
    Vu_lb = kip_to_lb(Vu_norm)
    b = section.b
    d = section.d
    fc = section.fc
    fy = section.fy

    Vc = _compute_Vc(fc, b, d)
    phi_Vc = PHI_SHEAR * Vc
    trace.append(
        TraceCheck(
            code_ref="ACI 318-19 Section 22.5.5.1",
            formula_id="Vc_simplified",
            inputs={"fc_psi": fc, "bw_in": b, "d_in": d},
            value=Vc,
            units="lb",
            status="ok",
        )
    )

    Av_bar = bar.area
    Av = n_legs * Av_bar
    s_min = min_stirrup_spacing(bar)

    # No stirrups needed
    if Vu_lb <= 0.5 * phi_Vc:
        trace.append(
            TraceCheck(
                code_ref="ACI 318-19 Section 9.6.3.1",
                formula_id="Vu_threshold_no_stirrups",
                inputs={"Vu_lb": Vu_lb, "phiVc_lb": phi_Vc},
                value=Vu_lb / max(phi_Vc, 1e-9),
                units="ratio",
                status="ok",
            )
        )
        return ShearResult(
            Vc=lb_to_kip(Vc),
            phi_Vc=lb_to_kip(phi_Vc),
            Vs_req=0,
            s_req=None,
            s_max=max_stirrup_spacing(b, d, fc, 0.0),
            s_min=s_min,
            status="No Shear Reinforcement Required (Vu < 0.5 * phi * Vc)",
            status_code="ok",
            Av=Av,
            Av_bar=Av_bar,
            trace=trace,
        )

    # Required Vs
    Vs_req = (Vu_lb / PHI_SHEAR) - Vc

    # Check max Vs
    Vs_max = _compute_Vs_max(fc, b, d)
    trace.append(
        TraceCheck(
            code_ref="ACI 318-19 Section 22.5.1.2",
            formula_id="Vs_max",
            inputs={"fc_psi": fc, "bw_in": b, "d_in": d},
            value=Vs_max,
            units="lb",
            status="ok",
        )
    )
    if Vs_req > Vs_max:
        logger.warning("Section too small for shear: Vs_req=%.0f > Vs_max=%.0f lb", Vs_req, Vs_max)
        trace.append(
            TraceCheck(
                code_ref="ACI 318-19 Section 22.5.1.2",
                formula_id="Vs_req_gt_Vs_max",
                inputs={"Vs_req_lb": Vs_req, "Vs_max_lb": Vs_max},
                value=Vs_req,
                units="lb",
                status="error",
            )
        )
        return ShearResult(
            Vc=lb_to_kip(Vc),
            phi_Vc=lb_to_kip(phi_Vc),
            Vs_req=lb_to_kip(Vs_req),
            s_req=None,
            s_max=None,
            s_min=s_min,
            status="Error: Section Dimensions too small for Shear (Vs > Vs_max). Increase Dimensions.",
            status_code="error",
            Av=Av,
            Av_bar=Av_bar,
            trace=trace,
        )

    s_max_limit = max_stirrup_spacing(b, d, fc, Vs_req)
    s_final = min(required_stirrup_spacing(Av, fy, d, Vs_req), s_max_limit, av_min_spacing(Av, fy, b, fc))

    if s_final < s_min:
        logger.warning("Stirrup spacing %.2f in below practical minimum %.2f in", s_final, s_min)
        trace.append(
            TraceCheck(
                code_ref="Detailing",
                formula_id="stirrup_spacing_below_minimum",
                inputs={"s_in": s_final, "s_min_in": s_min},
                value=s_final,
                units="in",
                status="error",
            )
        )
        return ShearResult(
            Vc=lb_to_kip(Vc),
            phi_Vc=lb_to_kip(phi_Vc),
            Vs_req=lb_to_kip(Vs_req),
            s_req=None,
            s_max=s_max_limit,
            s_min=s_min,
            status=f"Error: Required spacing {s_final:.2f} in is below the practical minimum. Use larger stirrups or more legs.",
            status_code="error",
            Av=Av,
            Av_bar=Av_bar,
            trace=trace,
        )

    trace.append(
        TraceCheck(
            code_ref="ACI 318-19 Table 9.7.6.2.2",
            formula_id="stirrup_spacing",
            inputs={"Av_in2": Av, "fy_psi": fy, "d_in": d, "Vs_req_lb": Vs_req},
            value=s_final,
            units="in",
            status="ok",
        )
    )
    return ShearResult(
        Vc=lb_to_kip(Vc),
        phi_Vc=lb_to_kip(phi_Vc),
        Vs_req=lb_to_kip(max(0, Vs_req)),
        s_req=s_final,
        s_max=s_max_limit,
        s_min=s_min,
        status="Add Stirrups" if Vs_req > 0 else "Minimum Stirrups Required",
        status_code="ok",
        Av=Av,
        Av_bar=Av_bar,
        trace=trace,
    )
