import streamlit as st

from hospital_core.data.firebase_client import load_firebase_settings
from hospital_core.errors import ConfigurationError
from hospital_core.logging import get_logger
from hospital_core.services.hospital_service import DEFAULT_YEAR, HospitalBinding
from hospital_core.services.messages import DEFAULT_LOCALE

logger = get_logger(__name__)

BINDING_KEY = "_hospital_binding"

# Central registry for session-state keys used across the app.
SESSION_DEFAULTS = {
    BINDING_KEY: None,
    "selected_year": DEFAULT_YEAR,
    "debug_mode": False,
}


def init_state():
    """Initialize session state with defaults."""
    for k, v in SESSION_DEFAULTS.items():
        if k not in st.session_state:
            st.session_state[k] = v


def _configured_locale() -> str:
    try:
        return load_firebase_settings().locale
    except ConfigurationError:
        # the binding reports the missing URL through its error cell
        return DEFAULT_LOCALE


def use_hospitals(reference_factory=None) -> HospitalBinding:
    """
    Mount the hospital binding for this browser session.

    The first call creates and activates the binding; later reruns get the
    same instance back. Pair with ``release_hospitals`` when leaving the page.
    """
    init_state()
    binding = st.session_state[BINDING_KEY]

    if binding is None:
        binding = HospitalBinding(
            reference_factory=reference_factory,
            locale=_configured_locale(),
            default_year=st.session_state["selected_year"],
        )
        st.session_state[BINDING_KEY] = binding
        logger.info("Hospital binding mounted")

    binding.activate()
    return binding


def release_hospitals():
    """Unmount the binding: detach its listener and drop it from the session."""
    binding = st.session_state.get(BINDING_KEY)
    if binding is None:
        return

    binding.deactivate()
    st.session_state[BINDING_KEY] = None
    logger.info("Hospital binding released")
