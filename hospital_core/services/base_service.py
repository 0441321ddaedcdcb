# =============================================================================
# hospital_core/services/base_service.py
# Shared plumbing for store-backed services
# =============================================================================

from __future__ import annotations
from abc import ABC
from typing import Optional, Dict, Any, Callable
from dataclasses import dataclass

from hospital_core.logging import get_logger, LogContext
from hospital_core.errors import handle_error, HospitalRegistryError

ProgressCallback = Callable[[int, str], None]


@dataclass
class ServiceResult:
    """Outcome of a batch store call that must not raise (imports, seeding)."""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, data: Any = None, details: Dict[str, Any] = None) -> ServiceResult:
        return cls(success=True, data=data, details=details)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        details: Dict[str, Any] = None,
    ) -> ServiceResult:
        return cls(success=False, error=error, error_code=error_code, details=details)


class BaseService(ABC):
    """
    Base for services that talk to the hospitals store.

    Gives subclasses a class-named logger, timed operation logging that can
    name the database path touched, an optional progress callback for batch
    work, and ``safe_execute`` for calls whose failure should be collected
    rather than raised.
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)
        self._progress_callback: Optional[ProgressCallback] = None

    def set_progress_callback(self, callback: ProgressCallback) -> None:
        """Register ``callback(percentage, message)`` for batch progress."""
        self._progress_callback = callback

    def _update_progress(self, percentage: int, message: str = "") -> None:
        if self._progress_callback:
            self._progress_callback(percentage, message)

    def log_operation(self, operation: str, target: Optional[str] = None) -> LogContext:
        """
        Timed logging context for one store operation.

        Usage:
            with self.log_operation("Deleting hospital", "hospitals/2024/-Nx1"):
                ref.delete()
        """
        return LogContext(self.logger, operation, target)

    def safe_execute(
        self,
        operation: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> ServiceResult:
        """Run ``func`` and fold any exception into a failed ServiceResult."""
        try:
            return ServiceResult.ok(func(*args, **kwargs))
        except HospitalRegistryError as e:
            handle_error(e, show_user_message=False)
            return ServiceResult.fail(e.message, error_code=e.code, details=e.details)
        except Exception as e:
            self.logger.error(f"{operation} failed: {e}", exc_info=True)
            return ServiceResult.fail(str(e), error_code="STORE_ERROR")
