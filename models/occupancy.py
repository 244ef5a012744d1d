from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SummaryReport:
    """Read-only comparison of stored room counters against worker assignments."""
    total_active_workers: int
    total_capacity: int
    total_derived_occupied: int     # Active housed workers whose room key matches a room
    total_stored_occupied: int      # Sum of the rooms' cached counters
    workers_with_rooms: int
    workers_without_rooms: int
    inconsistent_rooms: int
    unmatched_assignments: int      # Housed workers with no usable room key or no room for it
    has_discrepancy: bool


@dataclass
class RoomInconsistency:
    room_id: str
    room_number: str
    farm_id: str
    gender_restriction: str
    old_occupants: int
    new_occupants: int
    worker_names: List[str] = field(default_factory=list)

    @property
    def delta(self) -> int:
        return self.new_occupants - self.old_occupants


@dataclass
class RoomWriteFailure:
    inconsistency: RoomInconsistency
    error: str
    exception: Optional[BaseException] = None

    @property
    def room_id(self) -> str:
        return self.inconsistency.room_id


@dataclass
class SyncResult:
    total_rooms_checked: int
    rooms_updated: int
    inconsistencies_found: List[RoomInconsistency] = field(default_factory=list)
