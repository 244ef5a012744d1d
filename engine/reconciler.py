"""Room occupancy reconciliation. Worker assignments are the truth, room counters a cache.

Every room's ``stored_occupant_count`` should equal the number of active
workers assigned to its (farm, room number, gender restriction) key. Worker
moves and counter updates are not written together, so the two drift apart.
``compute_summary`` and ``find_inconsistencies`` only read; ``reconcile``
recomputes and overwrites the counters that disagree.

Callers must run at most one repair pass at a time over the same rooms.
Nothing here locks, and a pass cannot be cancelled once started.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from models.worker import Worker
from models.room import Room
from models.occupancy import RoomInconsistency, RoomWriteFailure, SummaryReport, SyncResult
from engine.room_keys import derive_room_occupancy, derive_room_occupants, worker_room_key

logger = logging.getLogger(__name__)


class RoomSyncError(RuntimeError):
    """One or more room counters could not be written.

    Carries the result for the rooms that were written and the failed subset,
    so the caller can retry just those rooms.
    """

    def __init__(self, result: SyncResult, failures: List[RoomWriteFailure]):
        self.result = result
        self.failures = failures
        first = failures[0]
        super().__init__(
            f"{len(failures)} room occupancy update(s) failed "
            f"(first: room {first.inconsistency.room_number} [{first.room_id}]: {first.error})"
        )


def compute_summary(
    workers: Optional[Iterable[Worker]],
    rooms: Optional[Iterable[Room]],
) -> SummaryReport:
    """Diagnostic totals for the occupancy check. No side effects."""
    workers = list(workers or [])
    rooms = list(rooms or [])
    derived = derive_room_occupancy(workers)
    room_keys = {room.key for room in rooms}

    active = [w for w in workers if w.is_active]
    housed = [w for w in active if w.is_housed]
    # Counted per worker so rooms sharing a key do not count their occupants twice
    matched = sum(1 for w in housed if worker_room_key(w) in room_keys)

    total_capacity = 0
    stored_occupied = 0
    inconsistent = 0
    for room in rooms:
        total_capacity += room.total_capacity or 0
        stored_occupied += room.stored_occupant_count or 0
        if room.stored_occupant_count != derived.get(room.key, 0):
            inconsistent += 1

    return SummaryReport(
        total_active_workers=len(active),
        total_capacity=total_capacity,
        total_derived_occupied=matched,
        total_stored_occupied=stored_occupied,
        workers_with_rooms=len(housed),
        workers_without_rooms=len(active) - len(housed),
        inconsistent_rooms=inconsistent,
        unmatched_assignments=len(housed) - matched,
        has_discrepancy=inconsistent > 0,
    )


def find_inconsistencies(
    workers: Optional[Iterable[Worker]],
    rooms: Optional[Iterable[Room]],
) -> List[RoomInconsistency]:
    """List every room whose stored counter differs from its worker-derived count."""
    workers = list(workers or [])
    counts = derive_room_occupancy(workers)
    occupants = derive_room_occupants(workers)

    found = []
    for room in rooms or []:
        key = room.key
        derived = counts.get(key, 0)
        if room.stored_occupant_count == derived:
            continue
        found.append(RoomInconsistency(
            room_id=room.room_id,
            room_number=room.room_number,
            farm_id=room.farm_id,
            gender_restriction=room.gender_restriction,
            old_occupants=room.stored_occupant_count,
            new_occupants=derived,
            worker_names=list(occupants.get(key, [])),
        ))
    return found


def _failure(item: RoomInconsistency, exc: Exception) -> RoomWriteFailure:
    logger.warning(
        "Failed to update room %s [%s] %s -> %s: %s",
        item.room_number, item.room_id, item.old_occupants, item.new_occupants, exc,
    )
    return RoomWriteFailure(inconsistency=item, error=str(exc) or type(exc).__name__, exception=exc)


def _finish(
    total_rooms: int,
    written: List[RoomInconsistency],
    failures: List[RoomWriteFailure],
) -> SyncResult:
    result = SyncResult(
        total_rooms_checked=total_rooms,
        rooms_updated=len(written),
        inconsistencies_found=written,
    )
    logger.info(
        "Occupancy sync: %d rooms checked, %d updated, %d failed",
        total_rooms, result.rooms_updated, len(failures),
    )
    if failures:
        raise RoomSyncError(result, failures)
    return result


def _plan(workers, rooms) -> Tuple[int, List[RoomInconsistency]]:
    rooms = list(rooms or [])
    return len(rooms), find_inconsistencies(workers, rooms)


def reconcile(
    workers: Optional[Iterable[Worker]],
    rooms: Optional[Iterable[Room]],
    writer,
) -> SyncResult:
    """Overwrite drifted room counters through ``writer.update_room_occupancy``.

    Every inconsistent room is attempted even if earlier writes fail. Raises
    ``RoomSyncError`` afterwards when any write failed.
    """
    total_rooms, plan = _plan(workers, rooms)
    written: List[RoomInconsistency] = []
    failures: List[RoomWriteFailure] = []

    for item in plan:
        try:
            writer.update_room_occupancy(item.room_id, item.new_occupants)
        except Exception as exc:
            failures.append(_failure(item, exc))
            continue
        written.append(item)

    return _finish(total_rooms, written, failures)


async def reconcile_async(
    workers: Optional[Iterable[Worker]],
    rooms: Optional[Iterable[Room]],
    writer,
) -> SyncResult:
    """Same as ``reconcile`` for a writer whose ``update_room_occupancy`` is a coroutine."""
    total_rooms, plan = _plan(workers, rooms)
    written: List[RoomInconsistency] = []
    failures: List[RoomWriteFailure] = []

    for item in plan:
        try:
            await writer.update_room_occupancy(item.room_id, item.new_occupants)
        except Exception as exc:
            failures.append(_failure(item, exc))
            continue
        written.append(item)

    return _finish(total_rooms, written, failures)


def retry_failures(failures: Iterable[RoomWriteFailure], writer) -> SyncResult:
    """Re-apply the writes of a previous pass that failed.

    Only safe while worker assignments are unchanged since that pass;
    otherwise run ``reconcile`` again on fresh records.
    """
    failures = list(failures)
    written: List[RoomInconsistency] = []
    still_failing: List[RoomWriteFailure] = []

    for failure in failures:
        item = failure.inconsistency
        try:
            writer.update_room_occupancy(item.room_id, item.new_occupants)
        except Exception as exc:
            still_failing.append(_failure(item, exc))
            continue
        written.append(item)

    return _finish(len(failures), written, still_failing)
