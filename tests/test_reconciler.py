"""Tests for room occupancy reconciliation."""

import sys
import os
import asyncio
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from models.worker import Worker
from models.room import Room
from data.record_store import InMemoryRecordStore
from engine.room_keys import derive_room_occupancy
from engine.reconciler import (
    compute_summary,
    find_inconsistencies,
    reconcile,
    reconcile_async,
    retry_failures,
    RoomSyncError,
)


def make_worker(wid="W1", name=None, farm="F1", status="active", sex="male", room="101"):
    return Worker(wid, name or f"Worker {wid}", farm, status, sex, 30, assigned_room_number=room)


def make_room(rid="R1", farm="F1", number="101", gender="male", capacity=4, stored=0):
    return Room(rid, farm, number, gender, capacity, stored)


class RecordingWriter:
    def __init__(self, fail_ids=()):
        self.calls = []
        self.fail_ids = set(fail_ids)

    def update_room_occupancy(self, room_id, new_count):
        self.calls.append((room_id, new_count))
        if room_id in self.fail_ids:
            raise ConnectionError("write timed out")


class FlakyStoreWriter:
    """Passes writes through to a store, except for the given room ids."""

    def __init__(self, store, fail_ids):
        self.store = store
        self.fail_ids = set(fail_ids)

    def update_room_occupancy(self, room_id, new_count):
        if room_id in self.fail_ids:
            raise ConnectionError("write timed out")
        self.store.update_room_occupancy(room_id, new_count)


class AsyncStoreWriter:
    def __init__(self, store):
        self.store = store

    async def update_room_occupancy(self, room_id, new_count):
        await asyncio.sleep(0)
        self.store.update_room_occupancy(room_id, new_count)


class TestComputeSummary:
    def test_mixed_dataset(self):
        rooms = [
            make_room("R1", number="1", gender="male", capacity=4, stored=1),
            make_room("R2", number="1", gender="female", capacity=2, stored=0),
        ]
        workers = [
            make_worker("W1", room="1"),
            make_worker("W2", room="1"),
            make_worker("W3", sex="female", room="1"),
            make_worker("W4", room=None),
            make_worker("W5", room="9"),
            make_worker("W6", status="inactive", room="1"),
        ]
        summary = compute_summary(workers, rooms)

        assert summary.total_active_workers == 5
        assert summary.total_capacity == 6
        assert summary.total_derived_occupied == 3
        assert summary.total_stored_occupied == 1
        assert summary.workers_with_rooms == 4
        assert summary.workers_without_rooms == 1
        assert summary.unmatched_assignments == 1
        assert summary.inconsistent_rooms == 2
        assert summary.has_discrepancy is True

    def test_consistent_rooms(self):
        rooms = [make_room(stored=1)]
        summary = compute_summary([make_worker()], rooms)
        assert summary.has_discrepancy is False
        assert summary.inconsistent_rooms == 0

    def test_empty_and_missing_inputs(self):
        summary = compute_summary(None, None)
        assert summary.total_active_workers == 0
        assert summary.total_capacity == 0
        assert summary.has_discrepancy is False

    def test_does_not_change_rooms(self):
        rooms = [make_room(stored=3)]
        compute_summary([make_worker()], rooms)
        assert rooms[0].stored_occupant_count == 3


class TestFindInconsistencies:
    def test_two_workers_stored_one(self):
        rooms = [make_room(capacity=4, stored=1)]
        workers = [make_worker("W1", name="Omar"), make_worker("W2", name="Said")]

        found = find_inconsistencies(workers, rooms)
        assert len(found) == 1
        assert found[0].room_id == "R1"
        assert found[0].old_occupants == 1
        assert found[0].new_occupants == 2
        assert found[0].worker_names == ["Omar", "Said"]

    def test_empty_room_with_stale_counter(self):
        found = find_inconsistencies([], [make_room(stored=3)])
        assert found[0].new_occupants == 0
        assert found[0].worker_names == []

    def test_gender_partition(self):
        # A woman in room "101" does not count towards the men's room "101"
        rooms = [make_room("RM", gender="male", stored=1), make_room("RF", gender="female", stored=0)]
        workers = [make_worker("W1", sex="female")]

        found = find_inconsistencies(workers, rooms)
        assert {(i.room_id, i.new_occupants) for i in found} == {("RM", 0), ("RF", 1)}


class TestReconcile:
    def test_updates_drifted_room(self):
        store = InMemoryRecordStore(
            workers=[make_worker("W1"), make_worker("W2")],
            rooms=[make_room(capacity=4, stored=1)],
        )
        result = reconcile(store.fetch_workers(), store.fetch_rooms(), store)

        assert result.total_rooms_checked == 1
        assert result.rooms_updated == 1
        assert len(result.inconsistencies_found) == 1
        assert store.get_room("R1").stored_occupant_count == 2

    def test_idempotent(self):
        store = InMemoryRecordStore(
            workers=[make_worker("W1"), make_worker("W2", sex="female")],
            rooms=[
                make_room("R1", stored=5),
                make_room("R2", gender="female", stored=0),
                make_room("R3", number="102", stored=0),
            ],
        )
        first = reconcile(store.fetch_workers(), store.fetch_rooms(), store)
        second = reconcile(store.fetch_workers(), store.fetch_rooms(), store)

        assert first.rooms_updated == 2
        assert second.rooms_updated == 0
        assert second.inconsistencies_found == []
        assert second.total_rooms_checked == 3

    def test_restores_invariant(self):
        workers = [make_worker(f"W{i}", sex="male" if i % 2 else "female", room=str(i % 3))
                   for i in range(12)]
        workers.append(make_worker("X1", status="inactive", room="0"))
        rooms = []
        for number in ["0", "1", "2", "3"]:
            rooms.append(make_room(f"M{number}", number=number, gender="male", stored=7))
            rooms.append(make_room(f"F{number}", number=number, gender="female", stored=0))
        store = InMemoryRecordStore(workers=workers, rooms=rooms)

        reconcile(store.fetch_workers(), store.fetch_rooms(), store)

        derived = derive_room_occupancy(store.fetch_workers())
        for room in store.fetch_rooms():
            assert room.stored_occupant_count == derived.get(room.key, 0)

    def test_consistent_rooms_are_not_written(self):
        writer = RecordingWriter()
        result = reconcile([make_worker()], [make_room(stored=1)], writer)
        assert writer.calls == []
        assert result.rooms_updated == 0

    def test_partial_failure_attempts_every_room(self):
        store = InMemoryRecordStore(
            workers=[make_worker("W1", room="1"), make_worker("W2", room="2"), make_worker("W3", room="3")],
            rooms=[make_room("R1", number="1"), make_room("R2", number="2"), make_room("R3", number="3")],
        )
        writer = FlakyStoreWriter(store, fail_ids=["R2"])

        with pytest.raises(RoomSyncError) as exc_info:
            reconcile(store.fetch_workers(), store.fetch_rooms(), writer)

        err = exc_info.value
        assert err.result.rooms_updated == 2
        assert [i.room_id for i in err.result.inconsistencies_found] == ["R1", "R3"]
        assert [f.room_id for f in err.failures] == ["R2"]
        assert "write timed out" in err.failures[0].error
        assert store.get_room("R1").stored_occupant_count == 1
        assert store.get_room("R2").stored_occupant_count == 0
        assert store.get_room("R3").stored_occupant_count == 1

    def test_retry_failed_subset(self):
        store = InMemoryRecordStore(
            workers=[make_worker("W1", room="1"), make_worker("W2", room="2")],
            rooms=[make_room("R1", number="1"), make_room("R2", number="2")],
        )
        with pytest.raises(RoomSyncError) as exc_info:
            reconcile(store.fetch_workers(), store.fetch_rooms(), FlakyStoreWriter(store, ["R2"]))

        result = retry_failures(exc_info.value.failures, store)
        assert result.total_rooms_checked == 1
        assert result.rooms_updated == 1
        assert store.get_room("R2").stored_occupant_count == 1
        assert compute_summary(store.fetch_workers(), store.fetch_rooms()).has_discrepancy is False

    def test_does_not_mutate_workers(self):
        workers = [make_worker()]
        reconcile(workers, [make_room(stored=0)], RecordingWriter())
        assert workers[0].assigned_room_number == "101"
        assert workers[0].status == "active"


class TestDuplicateAndMismatchedKeys:
    def test_rooms_sharing_a_key_count_occupants_once(self):
        rooms = [make_room("R1", number="1", stored=1), make_room("R2", number="1", stored=1)]
        summary = compute_summary([make_worker("W1", room="1")], rooms)

        assert summary.total_derived_occupied == 1
        assert summary.unmatched_assignments == 0
        assert summary.workers_with_rooms == 1
        assert summary.has_discrepancy is False

    def test_unknown_sex_is_unmatched(self):
        summary = compute_summary([make_worker("W1", sex="other", room="101")], [make_room()])
        assert summary.total_derived_occupied == 0
        assert summary.unmatched_assignments == 1

    def test_reconcile_sets_same_count_on_duplicate_rooms(self):
        store = InMemoryRecordStore(
            workers=[make_worker("W1", room="1"), make_worker("W2", room="1")],
            rooms=[make_room("R1", number="1", stored=0), make_room("R2", number=" 1 ", stored=5)],
        )
        result = reconcile(store.fetch_workers(), store.fetch_rooms(), store)

        assert result.rooms_updated == 2
        assert store.get_room("R1").stored_occupant_count == 2
        assert store.get_room("R2").stored_occupant_count == 2

    def test_sex_and_gender_matched_case_insensitively(self):
        rooms = [make_room(gender="Male", stored=1)]
        workers = [make_worker("W1", sex="MALE")]

        assert find_inconsistencies(workers, rooms) == []
        summary = compute_summary(workers, rooms)
        assert summary.total_derived_occupied == 1
        assert summary.unmatched_assignments == 0


class TestReconcileAsync:
    def test_async_writer(self):
        store = InMemoryRecordStore(
            workers=[make_worker("W1"), make_worker("W2")],
            rooms=[make_room(stored=0), make_room("R2", number="102", stored=4)],
        )
        result = asyncio.run(reconcile_async(store.fetch_workers(), store.fetch_rooms(), AsyncStoreWriter(store)))

        assert result.rooms_updated == 2
        assert store.get_room("R1").stored_occupant_count == 2
        assert store.get_room("R2").stored_occupant_count == 0

    def test_async_failure_raises_after_all_rooms(self):
        class FailingAsyncWriter:
            async def update_room_occupancy(self, room_id, new_count):
                raise TimeoutError("backend unavailable")

        with pytest.raises(RoomSyncError) as exc_info:
            asyncio.run(reconcile_async(
                [make_worker()],
                [make_room(stored=0), make_room("R2", number="102", stored=1)],
                FailingAsyncWriter(),
            ))
        assert len(exc_info.value.failures) == 2
        assert exc_info.value.result.rooms_updated == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
