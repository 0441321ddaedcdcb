# =============================================================================
# hospital_core/services/hospital_service.py
# Live hospital binding - Firebase subscription plus add/update/delete
# =============================================================================
"""
HospitalBinding keeps a flat list of hospitals in sync with the
``hospitals/{year}/{id}`` tree and forwards writes to the store.

State is exposed as ReactiveCells:
    hospitals      flattened records (replaced on every change)
    loading        True while any tracked operation is in flight
    error          last fixed error message, or None
    selected_year  year the UI is currently filtering on

Write operations do not touch ``hospitals``; the listener picks the
change up once the store has applied it.

Usage:
    with HospitalBinding() as binding:
        new_id = binding.add_hospital({"YEAR": "2024", "name": "Seoul General"})
        binding.update_hospital(new_id, "2024", {"name": "Seoul General Hospital"})
        binding.delete_hospital(new_id, "2024")
"""

from __future__ import annotations
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from hospital_core.data.firebase_client import get_database_reference
from hospital_core.data.paths import ROOT_PATH, hospital_path, year_path
from hospital_core.data.snapshot import (
    YEAR_FIELD,
    SnapshotMirror,
    flatten_snapshot,
    hospitals_to_frame,
)
from hospital_core.errors import SubscriptionError
from hospital_core.state.reactive import ReactiveCell
from .base_service import BaseService, ServiceResult
from .messages import DEFAULT_LOCALE, get_messages

DEFAULT_YEAR = "2024"

ReferenceFactory = Callable[[str], Any]


class HospitalBinding(BaseService):
    """
    Reactive binding between a page and the hospitals tree.

    Args:
        reference_factory: Builds a database reference for a path
            (defaults to the cached firebase_admin app)
        locale: Locale of the fixed error messages
        default_year: Initial value of ``selected_year``
    """

    def __init__(
        self,
        reference_factory: Optional[ReferenceFactory] = None,
        locale: str = DEFAULT_LOCALE,
        default_year: str = DEFAULT_YEAR,
    ):
        super().__init__()
        self._reference = reference_factory or get_database_reference
        self.messages = get_messages(locale)

        self.hospitals: ReactiveCell[List[Dict[str, Any]]] = ReactiveCell([], "hospitals")
        self.loading: ReactiveCell[bool] = ReactiveCell(False, "loading")
        self.error: ReactiveCell[Optional[str]] = ReactiveCell(None, "error")
        self.selected_year: ReactiveCell[str] = ReactiveCell(default_year, "selected_year")

        self._mirror = SnapshotMirror()
        self._registration = None
        self._active = False
        self._awaiting_first_snapshot = False
        self._in_flight = 0
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._active

    def activate(self) -> None:
        """
        Attach the listener to ``hospitals``.

        A failure to attach is reported through ``error`` only; nothing is
        raised and the binding stays inactive until activated again.
        """
        with self._lock:
            if self._active:
                return
            self._active = True
            self._awaiting_first_snapshot = True
            self._mirror.reset()
            self._begin()

        try:
            registration = self._reference(ROOT_PATH).listen(self._on_event)
        except Exception as e:
            with self._lock:
                self._active = False
            self._on_listener_error(e)
            return

        with self._lock:
            if self._active:
                self._registration = registration
                registration = None

        if registration is not None:
            # deactivated while listen() was still connecting
            registration.close()
            return

        self.logger.info(f"Listening to '{ROOT_PATH}'")

    def deactivate(self) -> None:
        """Detach the listener. Safe to call more than once."""
        with self._lock:
            if not self._active:
                return
            self._active = False
            registration, self._registration = self._registration, None

        if registration is not None:
            registration.close()
        self._finish_initial_load()
        self.logger.info(f"Stopped listening to '{ROOT_PATH}'")

    def __enter__(self) -> HospitalBinding:
        self.activate()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.deactivate()
        return False

    # ------------------------------------------------------------------
    # Listener
    # ------------------------------------------------------------------

    def _on_event(self, event) -> None:
        if not self._active:
            return

        try:
            snapshot = self._mirror.apply(event.event_type, event.path, event.data)
        except Exception as e:
            self._on_listener_error(
                SubscriptionError(
                    f"Could not apply change event: {e}",
                    path=getattr(event, "path", None),
                    event_type=getattr(event, "event_type", None),
                )
            )
            return

        # deactivate() may have run while the event was being applied
        if not self._active:
            return

        self.hospitals.set(flatten_snapshot(snapshot))
        self._finish_initial_load()

    def _on_listener_error(self, error: Exception) -> None:
        self.logger.error(f"Hospital listener failed: {error}", exc_info=error)
        self.error.set(self.messages["load"])
        self._finish_initial_load()

    def _finish_initial_load(self) -> None:
        with self._lock:
            if not self._awaiting_first_snapshot:
                return
            self._awaiting_first_snapshot = False
            self._end()

    # ------------------------------------------------------------------
    # Loading bookkeeping
    # ------------------------------------------------------------------

    def _begin(self) -> None:
        with self._lock:
            self._in_flight += 1
            self.loading.set(True)

    def _end(self) -> None:
        with self._lock:
            self._in_flight = max(0, self._in_flight - 1)
            self.loading.set(self._in_flight > 0)

    @contextmanager
    def _tracked(self, kind: str, operation: str):
        self._begin()
        self.error.set(None)
        try:
            with self.log_operation(operation) as op:
                yield op
        except Exception:
            self.error.set(self.messages[kind])
            raise
        finally:
            self._end()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_hospital(self, hospital: Mapping[str, Any]) -> str:
        """
        Push a new hospital under its ``YEAR`` partition.

        Args:
            hospital: Record fields including ``YEAR``; ``YEAR`` itself is not stored

        Returns:
            Key assigned by the store

        Raises:
            HospitalValidationError: if ``YEAR`` is missing or not a valid key
            Exception: whatever the store client raises
        """
        with self._tracked("add", "Adding hospital") as op:
            fields = dict(hospital)
            op.target = year_path(fields.pop(YEAR_FIELD, None))
            new_ref = self._reference(op.target).push(fields)
            return new_ref.key

    def update_hospital(self, hospital_id: str, year: str, hospital: Mapping[str, Any]) -> None:
        """
        Replace the record at ``hospitals/{year}/{hospital_id}`` wholesale.

        Fields missing from ``hospital`` are removed from the stored record.
        The year is not checked against where the record actually lives.
        """
        with self._tracked("update", f"Updating hospital {hospital_id}") as op:
            op.target = hospital_path(hospital_id, year)
            self._reference(op.target).set(dict(hospital))

    def delete_hospital(self, hospital_id: str, year: str) -> None:
        """Remove the record at ``hospitals/{year}/{hospital_id}``."""
        with self._tracked("delete", f"Deleting hospital {hospital_id}") as op:
            op.target = hospital_path(hospital_id, year)
            self._reference(op.target).delete()

    def import_hospitals(self, hospitals: Iterable[Mapping[str, Any]]) -> ServiceResult:
        """
        Add many hospitals one by one, continuing past failures.

        Returns:
            ServiceResult whose data (or details on failure) holds the added
            keys and the failed row indexes with their errors
        """
        records = list(hospitals)
        added: List[str] = []
        failed: List[Dict[str, Any]] = []

        for i, record in enumerate(records):
            result = self.safe_execute(f"Importing hospital {i + 1}", self.add_hospital, record)
            if result:
                added.append(result.data)
            else:
                failed.append({"row": i, "error": result.error})
            self._update_progress(int((i + 1) * 100 / len(records)), f"{i + 1}/{len(records)}")

        summary = {"added": added, "failed": failed}
        if failed:
            return ServiceResult.fail(
                f"{len(failed)} of {len(records)} hospitals could not be added",
                error_code="IMPORT_PARTIAL",
                details=summary,
            )
        return ServiceResult.ok(summary)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def hospitals_for_year(self, year: Optional[str] = None) -> List[Dict[str, Any]]:
        """Records of one partition (the selected year by default)."""
        year = str(year if year is not None else self.selected_year.get())
        return [h for h in self.hospitals.get() if h.get(YEAR_FIELD) == year]

    def available_years(self) -> List[str]:
        return sorted({h[YEAR_FIELD] for h in self.hospitals.get()})

    def to_frame(self, year: Optional[str] = None) -> pd.DataFrame:
        """DataFrame of all hospitals, or of one year when given."""
        records = self.hospitals.get() if year is None else self.hospitals_for_year(year)
        return hospitals_to_frame(records)
