# =============================================================================
# pages/01_Hospitals.py - Live hospital registry
# Browse hospitals by year and add, edit or delete them.
# =============================================================================
from __future__ import annotations

import streamlit as st

from hospital_core.state.session import init_state, release_hospitals, use_hospitals
from hospital_core.ui.hospital_components import (
    header,
    render_add_form,
    render_edit_form,
    render_hospital_table,
    render_status,
    render_year_selector,
)

st.set_page_config(page_title="Hospitals", page_icon="🏥", layout="wide")

init_state()
binding = use_hospitals()

header("Hospital Registry", "Live view of hospitals grouped by year")


@st.fragment(run_every="3s")
def live_table():
    # the listener thread updates the binding; this reruns to pick it up
    render_status(binding)
    year = render_year_selector(binding)
    render_hospital_table(binding, year)


live_table()

col_add, col_edit = st.columns(2)
with col_add:
    render_add_form(binding)
with col_edit:
    render_edit_form(binding, binding.hospitals_for_year())

with st.sidebar:
    st.toggle("Debug mode", key="debug_mode")
    if st.button("Disconnect live updates"):
        release_hospitals()
        st.rerun()
