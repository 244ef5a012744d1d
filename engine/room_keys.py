"""Gender-aware room identity and worker-derived occupancy."""

import logging
from typing import Dict, Iterable, List, Optional

from models.worker import Worker, normalize_sex
from models.room import RoomKey
from config.defaults import GENDER_RESTRICTION_BY_SEX

logger = logging.getLogger(__name__)


def gender_restriction_for(sex: Optional[str]) -> Optional[str]:
    """Map a worker's sex onto the room gender restriction that may house them."""
    return GENDER_RESTRICTION_BY_SEX.get(normalize_sex(sex))


def room_key(farm_id: Optional[str], room_number: Optional[str], sex: Optional[str]) -> Optional[RoomKey]:
    """Build the (farm, room number, gender restriction) key, or None if any part is unusable.

    A room number alone is not an identity: the same number exists once per
    gender within a farm.
    """
    if not farm_id:
        return None
    if room_number is None or not str(room_number).strip():
        return None
    restriction = gender_restriction_for(sex)
    if restriction is None:
        return None
    return (farm_id, str(room_number).strip(), restriction)


def worker_room_key(worker: Worker) -> Optional[RoomKey]:
    """Key of the room an active, housed worker counts towards."""
    if not worker.is_active or not worker.is_housed:
        return None
    key = room_key(worker.farm_id, worker.assigned_room_number, worker.sex)
    if key is None:
        logger.debug("Skipping worker %s: incomplete farm or sex for room key", worker.worker_id)
    return key


def derive_room_occupancy(workers: Optional[Iterable[Worker]]) -> Dict[RoomKey, int]:
    """Count active workers per room key, in first-seen order."""
    counts: Dict[RoomKey, int] = {}
    for worker in workers or []:
        key = worker_room_key(worker)
        if key is None:
            continue
        counts[key] = counts.get(key, 0) + 1
    return counts


def derive_room_occupants(workers: Optional[Iterable[Worker]]) -> Dict[RoomKey, List[str]]:
    """Names of the active workers attributed to each room key, in worker order."""
    occupants: Dict[RoomKey, List[str]] = {}
    for worker in workers or []:
        key = worker_room_key(worker)
        if key is None:
            continue
        occupants.setdefault(key, []).append(worker.full_name)
    return occupants
