# =============================================================================
# hospital_core/errors/__init__.py
# Centralized Error Handling for the Hospital Registry
# =============================================================================

from .exceptions import (
    HospitalRegistryError,
    HospitalValidationError,
    StoreConnectionError,
    SubscriptionError,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    ErrorContext,
    error_boundary,
)

__all__ = [
    # Exceptions
    "HospitalRegistryError",
    "HospitalValidationError",
    "StoreConnectionError",
    "SubscriptionError",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "ErrorContext",
    "error_boundary",
]
