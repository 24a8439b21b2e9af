import logging
import streamlit as st
from src.models.detailing import min_cover_cip
from src.models.section import BeamSection
from src.ui.design_state import init_design_state, update_design_inputs
from src.ui.tabs import design_tab, flexure_tab, shear_tab, report_tab

logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")

# Page Config
st.set_page_config(page_title="RC Section Designer", page_icon="🏗️", layout="wide")
init_design_state(st.session_state)

# Sidebar (Global Inputs)
st.sidebar.title("Configuración Global")
st.sidebar.subheader("Materiales")
fc = st.sidebar.number_input("f'c [psi]", 2500.0, 12000.0, 4000.0, 500.0)
fy = st.sidebar.number_input("fy [psi]", 40000.0, 100000.0, 60000.0, 5000.0)

st.sidebar.divider()
st.sidebar.subheader("Geometría Seccional")
b = st.sidebar.number_input("Ancho b [in]", 4.0, 100.0, 12.0)
h = st.sidebar.number_input("Altura h [in]", 4.0, 120.0, 18.0)
cover = st.sidebar.number_input("Recubrimiento tracción [in]", 0.5, 6.0, 1.5)
compression_cover = st.sidebar.number_input("Recubrimiento compresión [in]", 0.5, 6.0, 1.5)
side_cover = st.sidebar.number_input("Recubrimiento lateral [in]", 0.5, 6.0, 1.5)
clear_spacing = st.sidebar.number_input("Separación libre entre barras [in]", 0.5, 6.0, 1.5)
_, cover_note = min_cover_cip()
st.sidebar.caption(cover_note)

update_design_inputs(
    st.session_state,
    materials={"fc": fc, "fy": fy},
    covers={"tension": cover, "compression": compression_cover, "side": side_cover},
    spacing={"clear_spacing": clear_spacing},
)

# Create Section Object
try:
    section = BeamSection(b, h, fc, fy, cover, compression_cover=compression_cover,
                          side_cover=side_cover, clear_spacing=clear_spacing)
except ValueError as e:
    st.sidebar.error(str(e))
    st.stop()

# Main App
st.title("🏗️ Diseñador de Secciones RC (ACI 318-19)")

tab_flexure, tab_shear, tab_design, tab_report = st.tabs(
    ["🔄 Flexión", "✂️ Cortante", "🔍 Diseño automático", "📄 Reporte"]
)

with tab_flexure:
    flexure_tab.render(section)

with tab_shear:
    shear_tab.render(section)

with tab_design:
    design_tab.render()

with tab_report:
    report_tab.render(section)
