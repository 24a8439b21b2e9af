from __future__ import annotations

from typing import Any

import pandas as pd

from src.models.design_inputs import CoverConfig, DesignInputs, MaterialProperties, SpacingConfig
from src.models.section import BeamSection

DEFAULT_LAYERS = [
    {"tipo": "Tracción", "barra": "#8", "cantidad": 3, "profundidad": None},
]


def init_design_state(session_state: dict[str, Any]) -> None:
    if "design_inputs" not in session_state:
        session_state["design_inputs"] = DesignInputs().to_dict()
    if "layers" not in session_state:
        session_state["layers"] = [dict(row) for row in DEFAULT_LAYERS]


def update_design_inputs(session_state: dict[str, Any], **kwargs: Any) -> None:
    init_design_state(session_state)
    session_state["design_inputs"].update(kwargs)


def get_design_snapshot(session_state: dict[str, Any]) -> DesignInputs:
    init_design_state(session_state)
    data = session_state["design_inputs"]
    return DesignInputs(
        mu=float(data.get("mu", 100.0)),
        vu=float(data.get("vu", 50.0)),
        n_legs=int(data.get("n_legs", 2)),
        stirrup_bar=str(data.get("stirrup_bar", "#3")),
        materials=MaterialProperties(**data.get("materials", {})),
        covers=CoverConfig(**data.get("covers", {})),
        spacing=SpacingConfig(**data.get("spacing", {})),
    )


def get_layers(session_state: dict[str, Any]) -> list[dict[str, Any]]:
    init_design_state(session_state)
    return session_state["layers"]


def set_layers(session_state: dict[str, Any], rows: list[dict[str, Any]]) -> None:
    session_state["layers"] = [dict(row) for row in rows]


def build_section(base: BeamSection, rows: list[dict[str, Any]]) -> BeamSection:
    """Copy of the base section carrying the layer rows; an empty depth uses the cover default."""
    section = base.base_clone()
    for row in rows:
        quantity = row.get("cantidad")
        if not row.get("barra") or pd.isna(quantity) or not quantity:
            continue
        depth = row.get("profundidad")
        depth = None if depth == "" or pd.isna(depth) else float(depth)
        if row.get("tipo") == "Compresión":
            section.add_compression_layer(row["barra"], int(quantity), depth)
        else:
            section.add_tension_layer(row["barra"], int(quantity), depth)
    return section
