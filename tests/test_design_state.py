import math

import pytest

from src.models.section import BeamSection
from src.ui.design_state import (
    build_section,
    get_design_snapshot,
    get_layers,
    init_design_state,
    set_layers,
    update_design_inputs,
)


def test_design_state_snapshot_updates_consistently():
    session_state: dict[str, object] = {}
    init_design_state(session_state)
    update_design_inputs(session_state, mu=150.0, vu=95.0, n_legs=4)
    snap = get_design_snapshot(session_state)

    assert snap.mu == 150.0
    assert snap.vu == 95.0
    assert snap.n_legs == 4
    assert snap.stirrup_bar == "#3"


def test_snapshot_rebuilds_nested_configs():
    session_state: dict[str, object] = {}
    update_design_inputs(
        session_state,
        materials={"fc": 5000.0, "fy": 60000.0},
        covers={"tension": 2.5, "compression": 2.0, "side": 1.5},
        spacing={"clear_spacing": 1.0},
    )
    snap = get_design_snapshot(session_state)

    assert snap.materials.fc == 5000.0
    assert snap.covers.tension == 2.5
    assert snap.spacing.clear_spacing == 1.0


def test_init_keeps_existing_state():
    session_state: dict[str, object] = {}
    update_design_inputs(session_state, mu=80.0)
    init_design_state(session_state)
    assert get_design_snapshot(session_state).mu == 80.0


def test_layers_round_trip():
    session_state: dict[str, object] = {}
    assert get_layers(session_state)[0]["barra"] == "#8"
    rows = [{"tipo": "Tracción", "barra": "#6", "cantidad": 2, "profundidad": 15.0}]
    set_layers(session_state, rows)
    rows[0]["cantidad"] = 5
    assert get_layers(session_state)[0]["cantidad"] == 2


def test_build_section_from_editor_rows():
    base = BeamSection(12, 18)
    rows = [
        {"tipo": "Tracción", "barra": "#8", "cantidad": 3, "profundidad": math.nan},
        {"tipo": "Compresión", "barra": "#5", "cantidad": 2, "profundidad": ""},
        {"tipo": "Tracción", "barra": None, "cantidad": 2, "profundidad": None},
        {"tipo": "Tracción", "barra": "#6", "cantidad": 0, "profundidad": 14.0},
        {"tipo": "Tracción", "barra": "#6", "cantidad": math.nan, "profundidad": 14.0},
    ]
    section = build_section(base, rows)

    assert len(section.tension_layers) == 1
    assert section.tension_layers[0].depth == pytest.approx(16.5)
    assert len(section.compression_layers) == 1
    assert section.compression_layers[0].depth == pytest.approx(1.5)
    assert base.tension_layers == ()


def test_build_section_rejects_depth_outside_section():
    rows = [{"tipo": "Tracción", "barra": "#8", "cantidad": 3, "profundidad": 25.0}]
    with pytest.raises(ValueError):
        build_section(BeamSection(12, 18), rows)
