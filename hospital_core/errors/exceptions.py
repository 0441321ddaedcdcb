# =============================================================================
# hospital_core/errors/exceptions.py
# Custom Exception Hierarchy for the Hospital Registry
# =============================================================================

from typing import Optional, Dict, Any


class HospitalRegistryError(Exception):
    """
    Base exception for all Hospital Registry errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "DATA_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "HR_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# DATA LAYER EXCEPTIONS
# =============================================================================

class HospitalValidationError(HospitalRegistryError):
    """Raised when a hospital record or a store path segment is unusable"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value

        super().__init__(
            message=message,
            code="DATA_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# STORE EXCEPTIONS
# =============================================================================

class StoreConnectionError(HospitalRegistryError):
    """Raised when the Firebase app or database reference cannot be created"""

    def __init__(
        self,
        message: str,
        database_url: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if database_url:
            details["database_url"] = database_url

        super().__init__(
            message=message,
            code="STORE_001",
            details=details,
            **kwargs,
        )


class SubscriptionError(HospitalRegistryError):
    """Raised when a live listener cannot be attached or processed"""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        event_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        if event_type:
            details["event_type"] = event_type

        super().__init__(
            message=message,
            code="STORE_002",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(HospitalRegistryError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
