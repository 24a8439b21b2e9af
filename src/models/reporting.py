from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from src.models import shear
from src.models.design_inputs import DesignInputs
from src.models.flexure_checklist import build_flexure_checklist, build_flexure_summary
from src.models.result_types import DesignResult


@dataclass
class ReportBundle:
    flexure_res: Any
    shear_res: Any
    summary: dict[str, Any]
    checklist: list[dict[str, str]]
    warnings: list[str]
    governing_criteria: list[dict[str, str]]

    def export_payload(self) -> dict[str, Any]:
        return {
            "flexure": self.flexure_res.to_dict(),
            "shear": self.shear_res.to_dict(),
            "summary": self.summary,
            "checklist": self.checklist,
            "warnings": self.warnings,
            "governing_criteria": self.governing_criteria,
        }


def build_design_report(result: DesignResult, design_inputs: DesignInputs) -> ReportBundle:
    """Bundle flexure, shear and advisories for one analyzed or selected design."""
    res_shear = shear.design_shear(result.section, design_inputs.vu, design_inputs.stirrup_bar,
                                   design_inputs.n_legs)
    label = result.section.summary()
    summary = build_flexure_summary(label, result, design_inputs.mu)
    checklist = build_flexure_checklist(label, result, design_inputs.mu)

    warnings: list[str] = list(result.warnings)
    if res_shear.status_code in {"warning", "error"}:
        warnings.append(res_shear.status)
    if result.phi_Mn_kipft < design_inputs.mu:
        warnings.append(f"phiMn={result.phi_Mn_kipft:.1f} kip-ft < Mu={design_inputs.mu:.1f} kip-ft")

    governing = [
        {"mecanismo": "Flexión", "criterio_aci": "ACI 318-19 Sec. 22.2 / 21.2.2", "estado": result.status},
        {"mecanismo": "Cortante", "criterio_aci": "ACI 318-19 Sec. 22.5 / Tabla 9.7.6.2.2", "estado": res_shear.status},
    ]

    return ReportBundle(
        flexure_res=result,
        shear_res=res_shear,
        summary=summary,
        checklist=checklist,
        warnings=warnings,
        governing_criteria=governing,
    )


def designs_to_rows(designs: Iterable[DesignResult]) -> list[dict[str, Any]]:
    """Table rows for a list of search results."""
    rows = []
    for result in designs:
        section = result.section
        rows.append(
            {
                "b (in)": section.b,
                "h (in)": section.h,
                "Ag (in2)": section.gross_area,
                "Tracción": section.tension_summary(),
                "Compresión": section.compression_summary(),
                "As (in2)": round(result.As_tension, 2),
                "phiMn (kip-ft)": round(result.phi_Mn_kipft, 1),
                "epsilon_t": round(result.epsilon_t, 5),
                "phiVn (kips)": None if result.phi_Vn is None else round(result.phi_Vn, 1),
                "Estribos": result.stirrups or "",
                "Advertencias": "; ".join(result.warnings),
            }
        )
    return rows
