import streamlit as st

from src.models import shear
from src.models.rebar_catalog import STIRRUP_BAR_SIZES
from src.models.reinforcement import StirrupLayer
from src.ui import plotting
from src.ui.design_state import build_section, get_design_snapshot, get_layers, init_design_state, update_design_inputs


def render(base_section):
    st.header("Diseño por Cortante (V)")
    init_design_state(st.session_state)
    snapshot = get_design_snapshot(st.session_state)

    # Effective depth follows the layers entered in the flexure tab
    try:
        section = build_section(base_section, get_layers(st.session_state))
    except ValueError:
        section = base_section
    st.caption(f"d = {section.d:.2f} in")

    col1, col2 = st.columns(2)
    with col1:
        Vu = st.number_input("Cortante Último (Vu) [kips]", 0.0, None, snapshot.vu, 5.0, key="Vu")
    with col2:
        bars = [size.value for size in STIRRUP_BAR_SIZES]
        selected_index = bars.index(snapshot.stirrup_bar) if snapshot.stirrup_bar in bars else 0
        stirrup_bar = st.selectbox("Barra Estribo", bars, index=selected_index, key="stirrup_bar")
        n_legs = st.number_input("Ramas", 2, 4, snapshot.n_legs, key="n_legs")

    update_design_inputs(st.session_state, vu=Vu, n_legs=n_legs, stirrup_bar=stirrup_bar)

    res = shear.design_shear(section, Vu, stirrup_bar, n_legs)

    st.divider()

    c1, c2 = st.columns(2)
    with c1:
        st.metric("Vc (Concreto)", f"{res['Vc']:.2f} kips")
        st.metric("Vs Requerido", f"{res['Vs_req']:.2f} kips")

    with c2:
        if res['s_req']:
            st.success(f"Separacion Requerida: {res['s_req']:.1f} in")
            st.info(f"Separacion Maxima (Norma): {res['s_max']:.1f} in")
        elif res['status_code'] == "error":
            st.error(res['status'])
        else:
            st.info(res['status'])

    # Capacity of a chosen spacing
    st.subheader("Capacidad con separación elegida")
    default_s = float(res['s_req']) if res['s_req'] else max(section.d / 2, res['s_min'] or 3.0)
    s_chosen = st.number_input("Separación s [in]", 1.0, 48.0, round(default_s, 1), 0.5, key="s_chosen")
    capacity = shear.compute_shear_capacity(section, [StirrupLayer(stirrup_bar, n_legs, s_chosen)])
    k1, k2, k3 = st.columns(3)
    k1.metric("Vs", f"{capacity.Vs:.2f} kips")
    k2.metric("phi Vn", f"{capacity.phi_Vn:.2f} kips", delta=f"{capacity.phi_Vn - Vu:.2f} vs Vu")
    k3.metric("Vs max", f"{capacity.Vs_max:.2f} kips")
    for warning in capacity.warnings:
        st.warning(warning)

    # Visualization
    st.subheader("Esquema")
    fig = plotting.draw_beam_section_shear(section.b, section.h, section.side_cover, res.get('s_req'), n_legs)
    st.pyplot(fig)
