import streamlit as st
import pandas as pd

from src.models.design_inputs import SearchBounds
from src.models.design_search import (
    design_all_sections,
    filter_designs,
    sort_designs,
    unique_by_depth,
    unique_by_width,
)
from src.models.detailing import MemberType, proportion_dimensions
from src.models.reporting import designs_to_rows
from src.ui import plotting
from src.ui.design_state import get_design_snapshot, init_design_state


def render():
    st.header("Diseño Automático de Secciones")
    init_design_state(st.session_state)
    snapshot = get_design_snapshot(st.session_state)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Mu [kip-ft]", f"{snapshot.mu:.1f}")
        include_shear = st.checkbox("Diseñar estribos para Vu", value=False)
        if include_shear:
            st.caption(f"Vu = {snapshot.vu:.1f} kips, {snapshot.n_legs} ramas {snapshot.stirrup_bar}")
    with col2:
        min_w, max_w = st.slider("Ancho b [in]", 4, 48, (4, 35))
        min_h, max_h = st.slider("Altura h [in]", 4, 60, (4, 35))
    with col3:
        max_bars = st.number_input("Máx. barras por capa", 1, 8, 4)
        span_ft = st.number_input("Luz (predimensionado) [ft]", 0.0, 100.0, 0.0, 1.0)
        if span_ft > 0:
            w, d = proportion_dimensions(span_ft, MemberType.BEAM)
            st.caption(f"Predimensionado: b ≈ {w:g} in, h ≈ {d:g} in")

    bounds = SearchBounds(
        min_width=float(min_w), max_width=float(max_w),
        min_height=float(min_h), max_height=float(max_h),
        max_tension_bars=int(max_bars), max_compression_bars=int(max_bars),
    )

    if st.button("Buscar secciones", type="primary"):
        with st.spinner("Buscando..."):
            st.session_state["designs"] = design_all_sections(
                snapshot.mu,
                snapshot.materials,
                snapshot.covers,
                snapshot.spacing,
                bounds=bounds,
                shear_demand=snapshot.vu if include_shear else None,
                stirrup_bar=snapshot.stirrup_bar,
                n_legs=snapshot.n_legs,
            )

    designs = st.session_state.get("designs")
    if designs is None:
        st.info("Defina la demanda y pulse 'Buscar secciones'.")
        return
    if not designs:
        st.error("No se encontró ningún diseño factible en el rango dado.")
        return

    # Filtros
    f1, f2, f3, f4 = st.columns(4)
    width_12 = f1.checkbox("Solo b = 12 in")
    max_bar_7 = f2.checkbox("Barra máx. #7")
    dedupe = f3.selectbox("Duplicados", ["Todos", "Menor altura", "Menor ancho"])
    by_area = f4.checkbox("Ordenar por área")

    shown = filter_designs(designs, width=12.0 if width_12 else None, max_bar="#7" if max_bar_7 else None)
    if dedupe == "Menor altura":
        shown = unique_by_depth(shown)
    elif dedupe == "Menor ancho":
        shown = unique_by_width(shown)
    shown = sort_designs(shown, by_area=by_area)

    st.write(f"{len(shown)} diseños válidos")
    if not shown:
        return
    st.dataframe(pd.DataFrame(designs_to_rows(shown)), use_container_width=True)

    labels = [result.describe() for result in shown]
    index = st.selectbox("Diseño seleccionado", range(len(shown)), format_func=lambda i: labels[i])
    selected = shown[index]
    st.session_state["selected_design"] = selected

    c1, c2 = st.columns(2)
    with c1:
        st.pyplot(plotting.draw_beam_section_flexure(selected.section, selected))
    with c2:
        st.pyplot(plotting.draw_strain_diagram(selected))
    for warning in selected.warnings:
        st.warning(warning)
