"""Tests for the in-memory entity store."""

from datetime import datetime, timezone
from decimal import Decimal

from payroll_records.models.entities import AllowanceType, AuditLog, EntityKind
from payroll_records.services.entity_store import Collection, EntityStore


def _type(id: int, name: str = "Risk") -> AllowanceType:
    return AllowanceType(id=id, name=name, is_percentage=True)


class TestCollection:
    """Collection CRUD semantics."""

    def test_next_id_empty_is_one(self):
        assert Collection(EntityKind.ALLOWANCE_TYPE).next_id() == 1

    def test_next_id_is_max_plus_one(self):
        coll = Collection(EntityKind.ALLOWANCE_TYPE, [_type(4), _type(2)])
        assert coll.next_id() == 5

    def test_list_preserves_insertion_order(self):
        coll = Collection(EntityKind.ALLOWANCE_TYPE, [_type(4, "a"), _type(2, "b")])
        assert [t.name for t in coll.list()] == ["a", "b"]

    def test_insert_duplicate_id_replaces(self):
        coll = Collection(EntityKind.ALLOWANCE_TYPE, [_type(1, "old")])
        coll.insert(_type(1, "new"))
        assert len(coll) == 1
        assert coll.get_by_id(1).name == "new"

    def test_replace_applies_changes_but_keeps_id(self):
        coll = Collection(EntityKind.ALLOWANCE_TYPE, [_type(1)])
        updated = coll.replace(1, {"name": "Degree", "id": 99})
        assert updated.id == 1
        assert updated.name == "Degree"
        assert coll.get_by_id(1) is updated
        assert 99 not in coll

    def test_replace_missing_returns_none(self):
        coll = Collection(EntityKind.ALLOWANCE_TYPE)
        assert coll.replace(7, {"name": "x"}) is None

    def test_remove_missing_returns_none(self):
        coll = Collection(EntityKind.ALLOWANCE_TYPE, [_type(1)])
        assert coll.remove(7) is None
        assert len(coll) == 1

    def test_get_missing_returns_none(self):
        assert Collection(EntityKind.EMPLOYEE).get_by_id(3) is None


class TestEntityStore:
    """Store-level views."""

    def test_audit_trail_newest_first(self):
        store = EntityStore()
        ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for i in (1, 2, 3):
            store.audit_logs.insert(AuditLog(id=i, action="Create", details=str(i), performed_by="Admin", timestamp=ts))
        assert [log.id for log in store.audit_trail()] == [3, 2, 1]

    def test_snapshot_is_detached_from_later_mutations(self):
        store = EntityStore()
        store.allowance_types.insert(_type(1))
        snap = store.snapshot()
        store.allowance_types.insert(_type(2))
        store.allowance_types.remove(1)
        assert [t.id for t in snap.allowance_types] == [1]

    def test_collection_lookup_by_kind(self):
        store = EntityStore()
        assert store.collection(EntityKind.PAYSLIP) is store.payslips

    def test_clear(self):
        store = EntityStore()
        store.allowance_types.insert(_type(1))
        store.clear()
        assert store.snapshot().allowance_types == ()
