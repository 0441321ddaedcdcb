from __future__ import annotations
import streamlit as st

from hospital_core.logging import setup_logging
from hospital_core.state.session import init_state, release_hospitals
from hospital_core.ui.hospital_components import header

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="Hospital Registry",
    page_icon="🏥",
    layout="wide",
)


@st.cache_resource
def _configure_logging():
    setup_logging()
    return True


_configure_logging()
init_state()
# leaving the registry page unmounts its live listener
release_hospitals()

header("Hospital Registry", "Hospitals by year, synced live with Firebase")

st.markdown(
    """
    Records live in the Firebase Realtime Database under
    `hospitals/{year}/{id}`. Every change made here or anywhere else
    shows up on the **Hospitals** page as soon as the database reports it.
    """
)

st.page_link("pages/01_Hospitals.py", label="Open the hospital registry", icon="🏥")
