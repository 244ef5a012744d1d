"""In-memory record store: the read/write interface the occupancy engine talks to.

Scope is a farm id, or None for every farm. Records handed out are copies,
so callers can never change stored state except through
``update_room_occupancy``.
"""

import copy
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from models.worker import Worker
from models.room import Room
from models.farm import Farm

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """Workers, rooms and farms keyed by id, insertion ordered."""

    def __init__(
        self,
        workers: Optional[Iterable[Worker]] = None,
        rooms: Optional[Iterable[Room]] = None,
        farms: Optional[Iterable[Farm]] = None,
    ):
        self._workers: Dict[str, Worker] = {}
        self._rooms: Dict[str, Room] = {}
        self._farms: Dict[str, Farm] = {}
        self.write_log: List[dict] = []
        self.replace_all(workers or [], rooms or [], farms or [])

    def replace_all(self, workers: Iterable[Worker], rooms: Iterable[Room], farms: Iterable[Farm]) -> None:
        """Swap the whole dataset, e.g. after a new upload."""
        self._workers = {w.worker_id: copy.deepcopy(w) for w in workers}
        self._rooms = {r.room_id: copy.deepcopy(r) for r in rooms}
        self._farms = {f.farm_id: copy.deepcopy(f) for f in farms}
        logger.info(
            "Record store loaded: %d workers, %d rooms, %d farms",
            len(self._workers), len(self._rooms), len(self._farms),
        )

    # --- Read interface ---

    def fetch_workers(self, scope: Optional[str] = None) -> List[Worker]:
        return [copy.deepcopy(w) for w in self._workers.values()
                if scope is None or w.farm_id == scope]

    def fetch_rooms(self, scope: Optional[str] = None) -> List[Room]:
        return [copy.deepcopy(r) for r in self._rooms.values()
                if scope is None or r.farm_id == scope]

    def fetch_farms(self) -> List[Farm]:
        return [copy.deepcopy(f) for f in self._farms.values()]

    def get_room(self, room_id: str) -> Optional[Room]:
        room = self._rooms.get(room_id)
        return copy.deepcopy(room) if room else None

    # --- Write interface ---

    def update_room_occupancy(self, room_id: str, new_count: int) -> None:
        """Overwrite one room's stored occupant counter."""
        if room_id not in self._rooms:
            raise KeyError(f"Unknown room id: {room_id}")
        if new_count < 0:
            raise ValueError(f"Occupant count cannot be negative: {new_count}")
        room = self._rooms[room_id]
        old_count = room.stored_occupant_count
        room.stored_occupant_count = int(new_count)
        self.write_log.append({
            "timestamp": datetime.now(),
            "room_id": room_id,
            "old_value": old_count,
            "new_value": int(new_count),
        })
        logger.info("Room %s: stored occupants %s -> %s", room.label, old_count, new_count)

