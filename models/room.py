from dataclasses import dataclass
from typing import Optional, Tuple

from models.worker import normalize_sex

RoomKey = Tuple[str, str, str]  # (farm_id, room_number, gender_restriction)


@dataclass
class Room:
    room_id: str
    farm_id: str
    room_number: str
    gender_restriction: str         # "male", "female"
    total_capacity: Optional[int]
    stored_occupant_count: int      # Cached counter, may drift from worker assignments

    @property
    def gender(self) -> Optional[str]:
        """Gender restriction normalized like a worker's sex; None when unrecognized."""
        return normalize_sex(self.gender_restriction)

    @property
    def key(self) -> RoomKey:
        return (self.farm_id, str(self.room_number).strip(), self.gender)

    @property
    def label(self) -> str:
        return f"{self.farm_id}/{self.room_number} ({self.gender_restriction})"
