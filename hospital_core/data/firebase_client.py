# =============================================================================
# hospital_core/data/firebase_client.py
# Firebase Realtime Database client configuration
# Handles app initialisation, credentials and database references
# =============================================================================

from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import firebase_admin
import streamlit as st
from firebase_admin import credentials, db

from hospital_core.errors import ConfigurationError, StoreConnectionError
from hospital_core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_APP_NAME = "hospital-registry"
DEFAULT_LOCALE = "ko"


@dataclass
class FirebaseSettings:
    """Connection settings for the Realtime Database."""
    database_url: str
    credentials_path: Optional[str] = None
    credentials_info: Dict[str, Any] = field(default_factory=dict)
    app_name: str = DEFAULT_APP_NAME
    locale: str = DEFAULT_LOCALE


def _read_secrets_section() -> Dict[str, Any]:
    try:
        if "firebase" in st.secrets:
            return dict(st.secrets["firebase"])
    except Exception as e:
        # No secrets.toml at all; fall through to the environment
        logger.debug(f"Streamlit secrets unavailable: {e}")
    return {}


def load_firebase_settings(section: Optional[Dict[str, Any]] = None) -> FirebaseSettings:
    """
    Load Firebase settings from Streamlit secrets, falling back to env vars.

    Expects secrets in .streamlit/secrets.toml:
        [firebase]
        database_url = "https://your-project-default-rtdb.firebaseio.com"
        credentials_path = "service-account.json"   # or an inline table:
        # [firebase.credentials]
        # type = "service_account"
        # ...
        locale = "ko"

    Args:
        section: Explicit settings mapping (skips st.secrets when given)

    Raises:
        ConfigurationError: if no database URL can be found
    """
    section = dict(section) if section is not None else _read_secrets_section()

    database_url = section.get("database_url") or os.environ.get("FIREBASE_DATABASE_URL")
    if not database_url:
        raise ConfigurationError(
            "Firebase database URL is not configured. Set [firebase].database_url "
            "in .streamlit/secrets.toml or FIREBASE_DATABASE_URL.",
            config_key="firebase.database_url",
            expected_type="str",
        )

    return FirebaseSettings(
        database_url=database_url,
        credentials_path=section.get("credentials_path"),
        credentials_info=dict(section.get("credentials") or {}),
        app_name=section.get("app_name", DEFAULT_APP_NAME),
        locale=section.get("locale") or os.environ.get("HOSPITAL_LOCALE", DEFAULT_LOCALE),
    )


def _build_credential(settings: FirebaseSettings):
    if settings.credentials_info:
        return credentials.Certificate(settings.credentials_info)
    if settings.credentials_path:
        return credentials.Certificate(settings.credentials_path)
    # GOOGLE_APPLICATION_CREDENTIALS or the runtime's service account
    return credentials.ApplicationDefault()


def get_firebase_app(settings: Optional[FirebaseSettings] = None) -> firebase_admin.App:
    """
    Return the named firebase_admin app, initialising it on first use.

    Raises:
        ConfigurationError: if settings are missing
        StoreConnectionError: if the app cannot be initialised
    """
    settings = settings or load_firebase_settings()

    try:
        return firebase_admin.get_app(settings.app_name)
    except ValueError:
        pass  # not initialised yet

    try:
        app = firebase_admin.initialize_app(
            _build_credential(settings),
            {"databaseURL": settings.database_url},
            name=settings.app_name,
        )
    except (ValueError, IOError) as e:
        raise StoreConnectionError(
            f"Failed to initialise Firebase app: {e}",
            database_url=settings.database_url,
        ) from e

    logger.info(f"Firebase app '{settings.app_name}' initialised for {settings.database_url}")
    return app


@st.cache_resource
def get_cached_firebase_app() -> firebase_admin.App:
    """Firebase app shared across Streamlit sessions."""
    return get_firebase_app()


def get_database_reference(path: str, app: Optional[firebase_admin.App] = None) -> db.Reference:
    """
    Build a Realtime Database reference for ``path``.

    Args:
        path: Slash-separated database path, e.g. ``hospitals/2024``
        app: App to bind to (defaults to the cached app)
    """
    return db.reference(path, app=app or get_cached_firebase_app())


def cleanup_firebase_app(app_name: str = DEFAULT_APP_NAME) -> None:
    """Delete the named app, closing its HTTP sessions."""
    try:
        app = firebase_admin.get_app(app_name)
    except ValueError:
        return
    firebase_admin.delete_app(app)
    get_cached_firebase_app.clear()
    logger.info(f"Firebase app '{app_name}' deleted")
