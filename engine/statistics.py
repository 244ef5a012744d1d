"""Workforce and occupancy metrics for the statistics dashboard.

``aggregate`` is a pure function of (workers, rooms, time range, now): no
caching, no state between calls. Places occupied always come from worker
room assignments, never from the rooms' stored counters, so the figures are
meaningful even before the counters have been reconciled.
"""

import math
from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Tuple

from models.worker import Worker, normalize_sex
from models.room import Room
from models.metrics import MetricsSnapshot
from engine.room_keys import derive_room_occupancy
from config.defaults import (
    SEX_MALE, SEX_FEMALE,
    TIME_RANGE_DAYS, TIME_RANGE_ALIASES, DEFAULT_TIME_RANGE,
    HIGH_OCCUPANCY_THRESHOLD, LOW_OCCUPANCY_THRESHOLD,
    GENDER_BALANCE_TOLERANCE, AGE_BUCKETS, MINIMUM_BUCKETED_AGE,
    UNSPECIFIED_EXIT_REASON, NO_EXIT_REASON, PERCENT_DECIMALS,
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage(part: float, whole: float) -> float:
    """part / whole * 100, or 0 when whole is 0. Unrounded."""
    if not whole:
        return 0.0
    return part / whole * 100


def _pct(value: float) -> float:
    """Round half-up to the output precision."""
    quantum = Decimal(1).scaleb(-PERCENT_DECIMALS)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _complement_pct(rounded: float) -> float:
    """100 - rounded, at output precision, such that rounded + result == 100 exactly."""
    rest = _pct(100 - rounded)
    if rounded + rest != 100:
        rest = 100 - rounded
    return rest


def resolve_time_range(time_range: Optional[str]) -> str:
    """Normalize a selector to one of 7d/30d/90d/365d, falling back to the default."""
    if not time_range:
        return DEFAULT_TIME_RANGE
    key = str(time_range).strip().lower()
    key = TIME_RANGE_ALIASES.get(key, key)
    return key if key in TIME_RANGE_DAYS else DEFAULT_TIME_RANGE


def time_cutoff(time_range: Optional[str], now: datetime) -> datetime:
    return now - timedelta(days=TIME_RANGE_DAYS[resolve_time_range(time_range)])


def _as_datetime(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            # Compared in naive local time, like "now"
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return None


def _on_or_after(value, cutoff: datetime) -> bool:
    moment = _as_datetime(value)
    if moment is None:
        return False
    return moment >= cutoff


def exit_reason_histogram(exited: Iterable[Worker]) -> List[Tuple[str, int]]:
    """Count exits per reason, in first-seen order. Blank reasons count as unspecified."""
    counts: Counter = Counter()
    for worker in exited:
        reason = (worker.exit_reason or "").strip() or UNSPECIFIED_EXIT_REASON
        counts[reason] += 1
    return list(counts.items())


def top_exit_reason(histogram: List[Tuple[str, int]]) -> Tuple[str, int]:
    """Most frequent reason; ties go to the reason seen first."""
    best_reason, best_count = NO_EXIT_REASON, 0
    for reason, count in histogram:
        if count > best_count:
            best_reason, best_count = reason, count
    return best_reason, best_count


def average_stay_days(exited: Iterable[Worker]) -> int:
    """Mean whole days between entry and exit over workers with both dates."""
    stays = []
    for worker in exited:
        entry = _as_datetime(worker.entry_date)
        leave = _as_datetime(worker.exit_date)
        if entry is None or leave is None:
            continue
        stays.append((leave - entry).days)
    if not stays:
        return 0
    return round_half_up(sum(stays) / len(stays))


def age_statistics(active: Iterable[Worker]) -> dict:
    """Mean/min/max age and the fixed bucket histogram. Workers without an age are skipped."""
    ages = [w.age for w in active if w.age is not None]
    buckets = {label: 0 for label, _, _ in AGE_BUCKETS}
    under_age = 0
    for age in ages:
        if age < MINIMUM_BUCKETED_AGE:
            under_age += 1
            continue
        for label, low, high in AGE_BUCKETS:
            if age >= low and (high is None or age <= high):
                buckets[label] += 1
                break

    return {
        "average_age": round_half_up(sum(ages) / len(ages)) if ages else 0,
        "min_age": min(ages) if ages else 0,
        "max_age": max(ages) if ages else 0,
        "age_distribution": tuple(buckets.items()),
        "under_age_workers": under_age,
    }


def aggregate(
    workers: Optional[Iterable[Worker]],
    rooms: Optional[Iterable[Room]],
    time_range: Optional[str] = DEFAULT_TIME_RANGE,
    now: Optional[datetime] = None,
) -> MetricsSnapshot:
    """Compute the full metrics snapshot for already scope-filtered workers and rooms.

    Missing collections are treated as empty.
    """
    workers = list(workers or [])
    rooms = list(rooms or [])
    time_range = resolve_time_range(time_range)
    now = _as_datetime(now) or datetime.now()
    cutoff = time_cutoff(time_range, now)

    # Step 1: Worker partitions
    active = [w for w in workers if w.is_active]
    inactive = [w for w in workers if not w.is_active]
    exited = [w for w in workers if w.has_exited]

    # Step 2: Sex / gender / occupancy-state partitions
    male_workers = sum(1 for w in active if normalize_sex(w.sex) == SEX_MALE)
    female_workers = sum(1 for w in active if normalize_sex(w.sex) == SEX_FEMALE)
    male_rooms = sum(1 for r in rooms if r.gender == SEX_MALE)
    female_rooms = sum(1 for r in rooms if r.gender == SEX_FEMALE)

    derived = derive_room_occupancy(workers)
    room_counts = [(r, derived.get(r.key, 0)) for r in rooms]
    occupied_rooms = sum(1 for _, count in room_counts if count > 0)
    empty_rooms = sum(1 for _, count in room_counts if count == 0)
    full_rooms = sum(1 for r, count in room_counts
                     if r.total_capacity is not None and count >= r.total_capacity)

    # Steps 3-5: Capacity
    total_capacity = sum(r.total_capacity or 0 for r in rooms)
    occupied_places = sum(derived.values())
    available_places = total_capacity - occupied_places
    occupancy_rate = percentage(occupied_places, total_capacity)

    # Step 6: Movements in the window
    recent_arrivals = sum(1 for w in active if _on_or_after(w.entry_date, cutoff))
    recent_exits = sum(1 for w in exited if _on_or_after(w.exit_date, cutoff))

    # Steps 7-9: Exits, stays, ages
    reasons = exit_reason_histogram(exited)
    top_reason, top_count = top_exit_reason(reasons)
    ages = age_statistics(active)

    # Step 10: Rates
    turnover_rate = percentage(len(exited), len(workers))

    # Step 11: Indicators on unrounded values
    balance_margin = math.ceil(len(active) * GENDER_BALANCE_TOLERANCE)

    return MetricsSnapshot(
        time_range=time_range,
        cutoff=cutoff,
        total_workers=len(active),
        total_inactive_workers=len(inactive),
        total_workers_in_scope=len(workers),
        male_workers=male_workers,
        female_workers=female_workers,
        total_rooms=len(rooms),
        male_rooms=male_rooms,
        female_rooms=female_rooms,
        occupied_rooms=occupied_rooms,
        empty_rooms=empty_rooms,
        full_rooms=full_rooms,
        total_capacity=total_capacity,
        occupied_places=occupied_places,
        available_places=available_places,
        occupancy_rate=_pct(occupancy_rate),
        recent_arrivals=recent_arrivals,
        recent_exits=recent_exits,
        net_change=recent_arrivals - recent_exits,
        average_age=ages["average_age"],
        min_age=ages["min_age"],
        max_age=ages["max_age"],
        age_distribution=ages["age_distribution"],
        under_age_workers=ages["under_age_workers"],
        average_stay_days=average_stay_days(exited),
        total_exited_workers=len(exited),
        exit_reasons=tuple(reasons),
        top_exit_reason=top_reason,
        top_exit_reason_count=top_count,
        turnover_rate=_pct(turnover_rate),
        retention_rate=_complement_pct(_pct(turnover_rate)),
        utilization_rate=_pct(occupancy_rate),
        is_high_occupancy=occupancy_rate > HIGH_OCCUPANCY_THRESHOLD,
        is_low_occupancy=occupancy_rate < LOW_OCCUPANCY_THRESHOLD,
        has_recent_growth=recent_arrivals > recent_exits,
        is_gender_balanced=abs(male_workers - female_workers) <= balance_margin,
    )
