from __future__ import annotations

from typing import Any

from src.models.aci_constants import EPSILON_T_LOW_DUCTILITY, EPSILON_T_TENSION


def _state_from_status_code(status_code: str) -> str:
    if status_code == "ok":
        return "cumple"
    if status_code == "warning":
        return "advertencia"
    if status_code in {"error", "no_root"}:
        return "no cumple"
    return "pendiente"


def _As_min(res: Any) -> float:
    return res.rho_min * res.section.b * res.section.d


def _criterion_from_result(res: Any, Mu: float | None) -> str:
    if res.status_code in {"error", "no_root"}:
        return "Sección sin equilibrio"
    if Mu is not None and res.phi_Mn_kipft < Mu:
        return "Capacidad insuficiente"
    if res.As_tension <= _As_min(res) + 1e-9:
        return "Gobierna acero mínimo"
    if res.is_over_reinforced:
        return "Sección sobrerreforzada"
    return "Gobierna demanda por momento"


def build_flexure_summary(label: str, res: Any, Mu: float | None = None) -> dict[str, Any]:
    """One summary row for a flexural result; Mu in kip-ft."""
    return {
        "seccion": label,
        "estado": _state_from_status_code(res.status_code),
        "criterio_gobernante": _criterion_from_result(res, Mu),
        "ductilidad": res.ductility_class.value,
        "ductilidad_alerta": "sí" if res.epsilon_t < EPSILON_T_TENSION else "no",
        "Mu_kipft": None if Mu is None else round(float(Mu), 2),
        "phiMn_kipft": round(float(res.phi_Mn_kipft), 2),
        "c_in": round(float(res.c), 3),
        "a_in": round(float(res.a), 3),
        "As_in2": round(float(res.As_tension), 3),
        "As_comp_in2": round(float(res.As_compression), 3),
        "As_min_in2": round(float(_As_min(res)), 3),
        "rho": round(float(res.rho), 5),
        "rho_b": round(float(res.rho_balanced), 5),
        "phi": round(float(res.phi), 4),
        "epsilon_t": round(float(res.epsilon_t), 5),
    }


def build_flexure_checklist(label: str, res: Any, Mu: float | None = None) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    As_min = _As_min(res)
    min_steel_state = "cumple" if res.As_tension + 1e-9 >= As_min else "advertencia"
    rows.append(
        {
            "Sección": label,
            "Check": "Acero mínimo",
            "Code Ref": "ACI 318-19 Section 9.6.1.2",
            "Formula": "As_min",
            "Estado": min_steel_state,
            "Valor": f"As={res.As_tension:.2f} in2 | As_min={As_min:.2f} in2",
            "Comentario": _criterion_from_result(res, Mu),
        }
    )

    rows.append(
        {
            "Sección": label,
            "Check": "Cuantía balanceada",
            "Code Ref": "ACI 318-19 Section 22.2",
            "Formula": "rho_b",
            "Estado": "advertencia" if res.is_over_reinforced or res.rho > res.rho_max else "cumple",
            "Valor": f"rho={res.rho:.5f} | rho_max={res.rho_max:.5f} | rho_b={res.rho_balanced:.5f}",
            "Comentario": "Sobrerreforzada" if res.is_over_reinforced else "",
        }
    )

    if res.epsilon_t < EPSILON_T_LOW_DUCTILITY:
        ductility_state = "no cumple"
    elif res.epsilon_t < EPSILON_T_TENSION:
        ductility_state = "advertencia"
    else:
        ductility_state = "cumple"

    rows.append(
        {
            "Sección": label,
            "Check": "Ductilidad y factor phi",
            "Code Ref": "ACI 318-19 Section 21.2.2",
            "Formula": "phi_strain_classification",
            "Estado": ductility_state,
            "Valor": f"epsilon_t={res.epsilon_t:.5f} | phi={res.phi:.3f}",
            "Comentario": res.status,
        }
    )

    if Mu is not None:
        ok = res.phi_Mn_kipft + 1e-9 >= Mu
        rows.append(
            {
                "Sección": label,
                "Check": "Capacidad de sección",
                "Code Ref": "ACI 318-19 Section 9.5.1.1",
                "Formula": "phiMn >= Mu",
                "Estado": "cumple" if ok else "no cumple",
                "Valor": f"phiMn={res.phi_Mn_kipft:.1f} kip-ft | Mu={Mu:.1f} kip-ft",
                "Comentario": "" if ok else "Sección insuficiente para el momento aplicado.",
            }
        )

    return rows
