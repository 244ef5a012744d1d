from dataclasses import dataclass, fields
from datetime import datetime
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class MetricsSnapshot:
    """Workforce and occupancy figures for one scope and time range."""

    time_range: str
    cutoff: datetime

    # Workforce counts
    total_workers: int              # Active workers
    total_inactive_workers: int
    total_workers_in_scope: int
    male_workers: int
    female_workers: int

    # Rooms
    total_rooms: int
    male_rooms: int
    female_rooms: int
    occupied_rooms: int
    empty_rooms: int
    full_rooms: int

    # Capacity
    total_capacity: int
    occupied_places: int
    available_places: int           # Negative when overbooked
    occupancy_rate: float

    # Movements within the time range
    recent_arrivals: int
    recent_exits: int
    net_change: int

    # Ages of active workers
    average_age: int
    min_age: int
    max_age: int
    age_distribution: Tuple[Tuple[str, int], ...]
    under_age_workers: int

    # Departures
    average_stay_days: int
    total_exited_workers: int
    exit_reasons: Tuple[Tuple[str, int], ...]
    top_exit_reason: str
    top_exit_reason_count: int

    # Rates
    turnover_rate: float
    retention_rate: float
    utilization_rate: float

    # Indicators
    is_high_occupancy: bool
    is_low_occupancy: bool
    has_recent_growth: bool
    is_gender_balanced: bool

    @property
    def age_distribution_dict(self) -> Dict[str, int]:
        return dict(self.age_distribution)

    @property
    def exit_reasons_dict(self) -> Dict[str, int]:
        return dict(self.exit_reasons)

    def to_flat_dict(self, prefix: Optional[str] = None) -> Dict[str, object]:
        """Flatten into metric name -> scalar value, histograms expanded per label."""
        flat: Dict[str, object] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("age_distribution", "exit_reasons"):
                for label, count in value:
                    flat[f"{f.name}.{label}"] = count
            elif isinstance(value, datetime):
                flat[f.name] = value.isoformat()
            else:
                flat[f.name] = value
        if prefix:
            return {f"{prefix}.{k}": v for k, v in flat.items()}
        return flat
