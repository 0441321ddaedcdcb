# =============================================================================
# tests/unit/test_snapshot.py
# Unit Tests for snapshot flattening and the local mirror
# =============================================================================

import pytest

from hospital_core.data.snapshot import (
    SnapshotMirror,
    flatten_snapshot,
    hospitals_to_frame,
    sort_hospitals,
)


def _by_id(records):
    return {r["id"]: r for r in records}


class TestFlattenSnapshot:
    """Test year -> id -> fields flattening"""

    def test_one_record_per_year_and_id(self, sample_snapshot):
        records = flatten_snapshot(sample_snapshot)

        assert len(records) == 3
        assert {(r["YEAR"], r["id"]) for r in records} == {
            ("2023", "-A1"),
            ("2024", "-B1"),
            ("2024", "-B2"),
        }

    def test_original_fields_are_kept(self, sample_snapshot):
        records = _by_id(flatten_snapshot(sample_snapshot))

        assert records["-B2"] == {
            "id": "-B2",
            "YEAR": "2024",
            "name": "Incheon Clinic",
            "capacity": 80,
            "phone": "032-000-0000",
        }

    def test_id_and_year_override_stored_fields(self):
        snapshot = {"2024": {"-X": {"id": "stale", "YEAR": "1999", "name": "A"}}}

        (record,) = flatten_snapshot(snapshot)

        assert record["id"] == "-X"
        assert record["YEAR"] == "2024"
        assert record["name"] == "A"

    @pytest.mark.parametrize("snapshot", [None, {}])
    def test_empty_snapshot_flattens_to_empty_list(self, snapshot):
        assert flatten_snapshot(snapshot) == []

    def test_empty_year_buckets_are_skipped(self):
        snapshot = {"2023": None, "2024": {}, "2025": {"-C": {"name": "C"}}}

        records = flatten_snapshot(snapshot)

        assert [r["id"] for r in records] == ["-C"]

    def test_does_not_mutate_snapshot(self, sample_snapshot):
        flatten_snapshot(sample_snapshot)

        assert "id" not in sample_snapshot["2024"]["-B1"]


class TestSortAndFrame:
    """Test ordering helper and DataFrame view"""

    def test_sort_by_year_then_name(self, sample_snapshot):
        records = sort_hospitals(flatten_snapshot(sample_snapshot))

        assert [r["id"] for r in records] == ["-A1", "-B1", "-B2"]

    def test_frame_has_key_columns_first(self, sample_snapshot):
        df = hospitals_to_frame(flatten_snapshot(sample_snapshot))

        assert list(df.columns[:2]) == ["id", "YEAR"]
        assert len(df) == 3
        assert set(df.columns) >= {"name", "capacity", "address", "phone"}

    def test_empty_frame_keeps_key_columns(self):
        df = hospitals_to_frame([])

        assert df.empty
        assert list(df.columns) == ["id", "YEAR"]


class TestSnapshotMirror:
    """Test applying streamed put/patch events"""

    def test_initial_put_replaces_tree(self, sample_snapshot):
        mirror = SnapshotMirror()

        snapshot = mirror.apply("put", "/", sample_snapshot)

        assert snapshot == sample_snapshot

    def test_nested_put_adds_record(self, sample_snapshot):
        mirror = SnapshotMirror()
        mirror.apply("put", "/", sample_snapshot)

        snapshot = mirror.apply("put", "/2025/-N1", {"name": "New"})

        assert snapshot["2025"] == {"-N1": {"name": "New"}}
        assert snapshot["2024"] == sample_snapshot["2024"]

    def test_nested_put_replaces_record_wholesale(self, sample_snapshot):
        mirror = SnapshotMirror()
        mirror.apply("put", "/", sample_snapshot)

        snapshot = mirror.apply("put", "/2024/-B2", {"name": "Renamed"})

        assert snapshot["2024"]["-B2"] == {"name": "Renamed"}

    def test_put_none_removes_and_prunes_empty_parents(self, sample_snapshot):
        mirror = SnapshotMirror()
        mirror.apply("put", "/", sample_snapshot)

        snapshot = mirror.apply("put", "/2023/-A1", None)

        assert "2023" not in snapshot
        assert set(snapshot["2024"]) == {"-B1", "-B2"}

    def test_removing_last_record_empties_tree(self):
        mirror = SnapshotMirror()
        mirror.apply("put", "/", {"2024": {"-A": {"name": "A"}}})

        assert mirror.apply("put", "/2024/-A", None) is None
        assert flatten_snapshot(mirror.snapshot()) == []

    def test_patch_merges_children(self, sample_snapshot):
        mirror = SnapshotMirror()
        mirror.apply("put", "/", sample_snapshot)

        snapshot = mirror.apply(
            "patch",
            "/2024",
            {"-B1": None, "-B3": {"name": "Daegu"}, "-B2/capacity": 90},
        )

        assert set(snapshot["2024"]) == {"-B2", "-B3"}
        assert snapshot["2024"]["-B2"]["capacity"] == 90
        assert snapshot["2024"]["-B2"]["name"] == "Incheon Clinic"

    def test_put_on_empty_mirror_builds_parents(self):
        mirror = SnapshotMirror()
        mirror.apply("put", "/", None)

        snapshot = mirror.apply("put", "/2024/-A", {"name": "A"})

        assert snapshot == {"2024": {"-A": {"name": "A"}}}

    def test_snapshot_is_a_copy(self, sample_snapshot):
        mirror = SnapshotMirror()
        mirror.apply("put", "/", sample_snapshot)

        mirror.snapshot()["2024"].clear()

        assert set(mirror.snapshot()["2024"]) == {"-B1", "-B2"}

    def test_unknown_event_type_raises(self):
        with pytest.raises(ValueError):
            SnapshotMirror().apply("auth_revoked", "/", None)

    def test_patch_requires_mapping(self):
        with pytest.raises(ValueError):
            SnapshotMirror().apply("patch", "/2024", "oops")
