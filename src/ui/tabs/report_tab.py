import json

import pandas as pd
import streamlit as st

from src.models import flexure
from src.models.errors import EmptyTensionSteelError, NoNeutralAxisError
from src.models.reporting import build_design_report
from src.ui.design_state import build_section, get_design_snapshot, get_layers, init_design_state


def render(base_section):
    st.header("Reporte Resumen de Diseño")
    init_design_state(st.session_state)

    # Sync widget-only keys into central state (supports old navigation order)
    if "mu" in st.session_state:
        st.session_state["design_inputs"]["mu"] = st.session_state["mu"]
    if "Vu" in st.session_state:
        st.session_state["design_inputs"]["vu"] = st.session_state["Vu"]
    if "n_legs" in st.session_state:
        st.session_state["design_inputs"]["n_legs"] = st.session_state["n_legs"]
    if "stirrup_bar" in st.session_state:
        st.session_state["design_inputs"]["stirrup_bar"] = st.session_state["stirrup_bar"]

    snapshot = get_design_snapshot(st.session_state)

    source = st.radio("Sección a reportar", ["Capas de la pestaña Flexión", "Diseño automático seleccionado"],
                      horizontal=True)
    if source.startswith("Diseño"):
        result = st.session_state.get("selected_design")
        if result is None:
            st.info("Aún no hay un diseño automático seleccionado.")
            return
    else:
        try:
            result = flexure.compute_flexural_capacity(build_section(base_section, get_layers(st.session_state)))
        except (EmptyTensionSteelError, NoNeutralAxisError, ValueError) as e:
            st.error(f"No se puede generar el reporte: {e}")
            return

    bundle = build_design_report(result, snapshot)
    section = result.section

    st.subheader("Cargas de Diseno")
    st.caption("Valores tomados del estado central de diseño para mantener consistencia entre pestañas.")

    lc1, lc2, lc3 = st.columns(3)
    lc1.metric("Mu [kip-ft]", f"{snapshot.mu:.1f}")
    lc2.metric("Vu [kips]", f"{snapshot.vu:.1f}")
    lc3.metric("Sección", section.summary())

    st.divider()

    # ──────────────────────────────────────────────────────────────
    # 1. REFUERZO LONGITUDINAL
    # ──────────────────────────────────────────────────────────────
    st.subheader("1. Refuerzo Longitudinal")
    long_data = {
        "Ubicacion": ["Tracción", "Compresión"],
        "Capas": [section.tension_summary(), section.compression_summary()],
        "As (in2)": [f"{section.As_tension:.2f}", f"{section.As_compression:.2f}"],
    }
    st.table(pd.DataFrame(long_data))

    st.subheader("Checklist Flexión (resumen)")
    st.caption("Estado, criterio gobernante y alerta de ductilidad.")
    flex_summary_df = pd.DataFrame(
        [bundle.summary],
        columns=[
            "seccion",
            "estado",
            "criterio_gobernante",
            "ductilidad_alerta",
            "phiMn_kipft",
            "As_min_in2",
            "As_in2",
            "phi",
            "epsilon_t",
        ],
    )
    st.table(flex_summary_df)
    st.table(pd.DataFrame(bundle.checklist))

    # ──────────────────────────────────────────────────────────────
    # 2. REFUERZO TRANSVERSAL
    # ──────────────────────────────────────────────────────────────
    st.divider()
    st.subheader("2. Refuerzo Transversal (Estribos)")

    res_shear = bundle.shear_res
    st.write(f"**Cortante Vs:** {res_shear.Vs_req:.2f} kips")
    if res_shear.s_req is not None:
        st.metric("Separacion Estribos (Cortante)", f"{res_shear.s_req:.1f} in")
    elif res_shear.status_code == "error":
        st.error(res_shear.status)
    else:
        st.info(res_shear.status)

    st.divider()
    st.subheader("3. Criterios ACI Gobernantes")
    st.table(pd.DataFrame(bundle.governing_criteria))

    st.subheader("4. Advertencias Activas")
    if bundle.warnings:
        for warning in bundle.warnings:
            st.warning(warning)
    else:
        st.success("Sin advertencias activas para el conjunto actual de diseño.")

    st.divider()
    st.subheader("5. Exportación")
    payload = bundle.export_payload()
    criteria_df = pd.DataFrame(bundle.governing_criteria)
    csv_data = criteria_df.to_csv(index=False).encode("utf-8")

    cexp1, cexp2 = st.columns(2)
    cexp1.download_button(
        label="Descargar criterios (CSV)",
        data=csv_data,
        file_name="rc_section_governing_criteria.csv",
        mime="text/csv",
    )
    cexp2.download_button(
        label="Descargar reporte técnico (JSON)",
        data=json.dumps(payload, indent=2, ensure_ascii=False, default=str),
        file_name="rc_section_report_payload.json",
        mime="application/json",
    )
