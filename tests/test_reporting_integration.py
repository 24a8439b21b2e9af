from src.models.design_inputs import DesignInputs, SearchBounds
from src.models.design_search import design_all_sections
from src.models.flexure import compute_flexural_capacity
from src.models.reporting import build_design_report, designs_to_rows
from src.models.section import BeamSection


def _reference_result():
    section = BeamSection(12, 18, 4000, 60000, 1.5)
    section.add_tension_layer("#8", 3, depth=16)
    return compute_flexural_capacity(section)


def test_report_bundle_contains_governing_criteria_and_payload():
    bundle = build_design_report(_reference_result(), DesignInputs(mu=100, vu=50))

    assert len(bundle.governing_criteria) == 2
    assert [row["mecanismo"] for row in bundle.governing_criteria] == ["Flexión", "Cortante"]
    payload = bundle.export_payload()
    assert set(payload) == {"flexure", "shear", "summary", "checklist", "warnings", "governing_criteria"}
    assert "trace" in payload["flexure"]
    assert "trace" in payload["shear"]
    assert payload["shear"]["status"] == "Add Stirrups"
    assert len(payload["checklist"]) == 4
    assert bundle.warnings == []


def test_report_collects_warnings():
    bundle = build_design_report(_reference_result(), DesignInputs(mu=200, vu=200))

    assert any(w.startswith("phiMn=") for w in bundle.warnings)
    assert any("Vs_max" in w for w in bundle.warnings)
    assert bundle.summary["criterio_gobernante"] == "Capacidad insuficiente"


def test_report_deterministic_for_same_inputs():
    design_inputs = DesignInputs(mu=120, vu=60, n_legs=4)
    p1 = build_design_report(_reference_result(), design_inputs).export_payload()
    p2 = build_design_report(_reference_result(), design_inputs).export_payload()
    assert p1 == p2


def test_search_results_to_rows():
    bounds = SearchBounds(min_width=12, max_width=12, min_height=16, max_height=18)
    designs = design_all_sections(100, bounds=bounds, shear_demand=30)
    rows = designs_to_rows(designs)

    assert len(rows) == len(designs)
    assert [row["h (in)"] for row in rows] == [d.height for d in designs]
    for row in rows:
        assert row["phiMn (kip-ft)"] >= 100
        assert row["phiVn (kips)"] >= 30
        assert row["Estribos"]


def test_rows_for_unanalyzed_shear():
    (row,) = designs_to_rows([_reference_result()])
    assert row["phiVn (kips)"] is None
    assert row["Estribos"] == ""
    assert row["Tracción"]
