import streamlit as st
import pandas as pd

from src.models import flexure
from src.models.errors import EmptyTensionSteelError, NoNeutralAxisError
from src.models.flexure_checklist import build_flexure_checklist, build_flexure_summary
from src.models.rebar_catalog import BEAM_BAR_SIZES
from src.ui import plotting
from src.ui.design_state import (
    build_section,
    get_design_snapshot,
    get_layers,
    init_design_state,
    set_layers,
    update_design_inputs,
)

LAYER_COLUMNS = ["tipo", "barra", "cantidad", "profundidad"]


def _render_status_box(status_code: str, message: str) -> None:
    if status_code == "ok":
        st.success(message)
    elif status_code == "warning":
        st.warning(message)
    else:
        st.error(message)


def render(base_section):
    st.header("Análisis por Flexión")
    init_design_state(st.session_state)
    snapshot = get_design_snapshot(st.session_state)

    mu = st.number_input("Momento Último (Mu) [kip-ft]", 0.0, None, snapshot.mu, 10.0, key="mu")
    update_design_inputs(st.session_state, mu=mu)

    # 1) Capas de refuerzo
    st.subheader("Capas de refuerzo")
    st.caption("Profundidad medida desde la fibra superior [in]; vacío usa el recubrimiento.")
    edited = st.data_editor(
        pd.DataFrame(get_layers(st.session_state), columns=LAYER_COLUMNS),
        num_rows="dynamic",
        column_config={
            "tipo": st.column_config.SelectboxColumn("Tipo", options=["Tracción", "Compresión"], required=True),
            "barra": st.column_config.SelectboxColumn("Barra", options=[s.value for s in BEAM_BAR_SIZES], required=True),
            "cantidad": st.column_config.NumberColumn("Cantidad", min_value=1, max_value=20, step=1),
            "profundidad": st.column_config.NumberColumn("Profundidad [in]", min_value=0.0, format="%.2f"),
        },
        key="layers_editor",
    )
    rows = edited.to_dict("records")
    set_layers(st.session_state, rows)

    try:
        section = build_section(base_section, rows)
        res = flexure.compute_flexural_capacity(section)
    except EmptyTensionSteelError:
        st.info("Agregue al menos una capa de tracción para calcular la capacidad.")
        return
    except NoNeutralAxisError as e:
        st.error(f"Sin eje neutro: {e}")
        return
    except ValueError as e:
        st.error(str(e))
        return

    # 2) Resultados
    st.subheader("Resultados")
    c1, c2, c3 = st.columns([1, 1, 1])
    with c1:
        _render_status_box(res.status_code, res.status)
        st.metric("phi Mn", f"{res.phi_Mn_kipft:.1f} kip-ft",
                  delta=f"{res.phi_Mn_kipft - mu:.1f} vs Mu" if mu > 0 else None)
        st.metric("Mn", f"{res.Mn_kipft:.1f} kip-ft")
        st.metric("phi", f"{res.phi:.3f}")
    with c2:
        st.metric("c", f"{res.c:.3f} in")
        st.metric("a", f"{res.a:.3f} in")
        st.metric("epsilon_t", f"{res.epsilon_t:.5f}")
        st.caption(f"{res.ductility_class.value} | rho={res.rho:.5f} | rho_b={res.rho_balanced:.5f}")
    with c3:
        st.pyplot(plotting.draw_beam_section_flexure(section, res))

    st.pyplot(plotting.draw_strain_diagram(res))

    st.subheader("Respuesta por capa")
    st.table(pd.DataFrame([item.to_dict() for item in res.layers]))

    for warning in res.warnings:
        st.warning(warning)

    # 3) Checklist de comprobaciones ACI
    st.divider()
    st.subheader("Checklist de comprobaciones ACI")
    summary = build_flexure_summary(section.summary(), res, mu)
    st.caption(f"Controla: {summary['criterio_gobernante']}")
    checklist_df = pd.DataFrame(
        build_flexure_checklist(section.summary(), res, mu),
        columns=["Sección", "Check", "Code Ref", "Formula", "Estado", "Valor", "Comentario"],
    )
    st.table(checklist_df)
