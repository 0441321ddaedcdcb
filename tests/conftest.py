# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import copy
import itertools
from collections import namedtuple
from typing import Any, Callable, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest


# =============================================================================
# IN-MEMORY REALTIME DATABASE
# =============================================================================

Event = namedtuple("Event", ["event_type", "path", "data"])


def _parts(path: str) -> List[str]:
    return [p for p in path.split("/") if p]


class FakeRegistration:
    """Stands in for firebase_admin's ListenerRegistration."""

    def __init__(self, db: "FakeDatabase", entry: Tuple[str, Callable]):
        self._db = db
        self._entry = entry
        self.closed = False

    def close(self):
        self.closed = True
        if self._entry in self._db.listeners:
            self._db.listeners.remove(self._entry)


class FakeReference:
    """Subset of firebase_admin.db.Reference used by the binding."""

    def __init__(self, db: "FakeDatabase", path: str):
        self._db = db
        self.path = "/".join(_parts(path))

    @property
    def key(self) -> Optional[str]:
        parts = _parts(self.path)
        return parts[-1] if parts else None

    def get(self):
        return self._db.get(self.path)

    def set(self, value):
        self._db.check("set")
        self._db.write(self.path, value)

    def push(self, value=""):
        self._db.check("push")
        key = self._db.next_key()
        child = FakeReference(self._db, f"{self.path}/{key}")
        self._db.write(child.path, value)
        return child

    def delete(self):
        self._db.check("delete")
        self._db.write(self.path, None)

    def listen(self, callback):
        self._db.check("listen")
        entry = (self.path, callback)
        self._db.listeners.append(entry)
        callback(Event("put", "/", self._db.get(self.path)))
        return FakeRegistration(self._db, entry)


class FakeDatabase:
    """
    Nested-dict database with push keys, listeners and failure injection.

    ``reference`` has the shape of the binding's reference factory.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.tree: Dict[str, Any] = copy.deepcopy(data) if data else {}
        self.listeners: List[Tuple[str, Callable]] = []
        self.calls: List[Tuple[str, str]] = []
        self._failures: Dict[str, Exception] = {}
        self._keys = itertools.count(1)

    def reference(self, path: str) -> FakeReference:
        return FakeReference(self, path)

    def next_key(self) -> str:
        return f"-Key{next(self._keys):04d}"

    def fail(self, operation: str, error: Exception) -> None:
        """Make the next ``operation`` (push/set/delete/listen) raise ``error``."""
        self._failures[operation] = error

    def check(self, operation: str) -> None:
        error = self._failures.pop(operation, None)
        if error is not None:
            raise error

    def get(self, path: str):
        node: Any = self.tree
        for part in _parts(path):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return copy.deepcopy(node) if node != {} else None

    def write(self, path: str, value) -> None:
        parts = _parts(path)
        self.calls.append(("write", path))
        if value is None or value == {}:
            self._delete(parts)
        else:
            node = self.tree
            for part in parts[:-1]:
                node = node.setdefault(part, {})
            node[parts[-1]] = copy.deepcopy(value)
        self._notify(parts, value if value != {} else None)

    def _delete(self, parts: List[str]) -> None:
        stack = []
        node = self.tree
        for part in parts[:-1]:
            if part not in node:
                return
            stack.append((node, part))
            node = node[part]
        node.pop(parts[-1], None)
        while stack and not node:
            parent, key = stack.pop()
            parent.pop(key)
            node = parent

    def _notify(self, parts: List[str], value) -> None:
        for listen_path, callback in list(self.listeners):
            base = _parts(listen_path)
            if parts[:len(base)] == base:
                relative = "/" + "/".join(parts[len(base):])
                callback(Event("put", relative, copy.deepcopy(value)))
            elif base[:len(parts)] == parts:
                callback(Event("put", "/", self.get(listen_path)))

    def emit(self, event_type: str, path: str, data) -> None:
        """Deliver a raw event to every registered listener."""
        for _, callback in list(self.listeners):
            callback(Event(event_type, path, copy.deepcopy(data)))


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_snapshot():
    """Two years of hospitals as stored under /hospitals"""
    return {
        "2023": {
            "-A1": {"name": "Seoul General", "capacity": 500},
        },
        "2024": {
            "-B1": {"name": "Busan Medical Center", "address": "Busan"},
            "-B2": {"name": "Incheon Clinic", "capacity": 80, "phone": "032-000-0000"},
        },
    }


@pytest.fixture
def fake_db():
    """Empty in-memory database"""
    return FakeDatabase()


@pytest.fixture
def seeded_db(sample_snapshot):
    """In-memory database holding the sample snapshot under /hospitals"""
    return FakeDatabase({"hospitals": sample_snapshot})


@pytest.fixture
def binding_factory():
    """Create HospitalBindings and deactivate them after the test"""
    from hospital_core.services.hospital_service import HospitalBinding

    created = []

    def make(db, **kwargs):
        binding = HospitalBinding(reference_factory=db.reference, **kwargs)
        created.append(binding)
        return binding

    yield make

    for binding in created:
        binding.deactivate()


# =============================================================================
# MOCK FIXTURES
# =============================================================================

class _SessionState(dict):
    """dict with attribute access, like st.session_state"""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e


@pytest.fixture
def mock_streamlit(monkeypatch):
    """Mock Streamlit in the modules that render or read session state"""
    import hospital_core.errors.handlers as handlers
    import hospital_core.state.session as session
    import hospital_core.ui.hospital_components as components

    mock_st = MagicMock()
    mock_st.session_state = _SessionState()

    monkeypatch.setattr(handlers, "st", mock_st)
    monkeypatch.setattr(session, "st", mock_st)
    monkeypatch.setattr(components, "st", mock_st)

    yield mock_st
