# =============================================================================
# hospital_core/services/__init__.py
# Service Layer for the Hospital Registry
# Separates store access from UI presentation
# =============================================================================
"""
Service Layer for the Hospital Registry

Usage Example:
-------------
    from hospital_core.services import HospitalBinding

    binding = HospitalBinding()
    binding.activate()
    new_id = binding.add_hospital({"YEAR": "2024", "name": "Busan Medical Center"})
    print(binding.loading.get(), binding.error.get())
    binding.deactivate()
"""

from .base_service import BaseService, ServiceResult
from .hospital_service import HospitalBinding, DEFAULT_YEAR
from .messages import MESSAGES, get_messages

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Hospital binding
    "HospitalBinding",
    "DEFAULT_YEAR",
    # Messages
    "MESSAGES",
    "get_messages",
]
