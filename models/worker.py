from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from config.defaults import STATUS_ACTIVE, STATUS_INACTIVE, SEX_MALE, SEX_FEMALE


@dataclass
class Worker:
    worker_id: str
    full_name: str
    farm_id: Optional[str]
    status: str                                  # "active", "inactive"
    sex: Optional[str]                           # "male", "female"
    age: Optional[int] = None
    entry_date: Optional[datetime] = None
    exit_date: Optional[datetime] = None         # Only set once an inactive worker has left
    exit_reason: Optional[str] = None
    assigned_room_number: Optional[str] = None   # None or blank = unhoused

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    @property
    def has_exited(self) -> bool:
        """Inactive with a recorded departure date."""
        return self.status == STATUS_INACTIVE and self.exit_date is not None

    @property
    def is_housed(self) -> bool:
        return bool(self.assigned_room_number and str(self.assigned_room_number).strip())


def normalize_sex(value) -> Optional[str]:
    """Lower-cased "male"/"female", or None for blank and unknown values."""
    if value is None:
        return None
    value = str(value).strip().lower()
    return value if value in (SEX_MALE, SEX_FEMALE) else None
