"""Schema validation for uploaded worker, room and farm tables."""

from dataclasses import dataclass, field
from typing import List
import pandas as pd

from data.loader import STATUS_VALUES, SEX_VALUES, ROOM_GENDER_VALUES


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


WORKER_REQUIRED_COLUMNS = [
    "Worker ID",
    "Full Name",
    "Farm ID",
    "Status",
    "Sex",
]

ROOM_REQUIRED_COLUMNS = [
    "Room ID",
    "Farm ID",
    "Room Number",
    "Gender",
    "Total Capacity",
    "Current Occupants",
]

FARM_REQUIRED_COLUMNS = [
    "Farm ID",
    "Farm Name",
]


def _check_required_columns(df: pd.DataFrame, required: List[str], file_label: str) -> ValidationResult:
    result = ValidationResult()
    missing = [col for col in required if col not in df.columns]
    if missing:
        result.is_valid = False
        result.errors.append(f"{file_label}: Missing required columns: {', '.join(missing)}")
    return result


def _unknown_values(series: pd.Series, allowed) -> List[str]:
    values = series.dropna().astype(str).str.strip().str.lower()
    return sorted(set(v for v in values if v and v not in allowed))


def validate_workers(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, WORKER_REQUIRED_COLUMNS, "Workers")
    if not result.is_valid:
        return result

    dupes = df.duplicated(subset=["Worker ID"], keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(f"Workers: Duplicate worker ids: {df[dupes]['Worker ID'].unique().tolist()}")

    unknown_status = _unknown_values(df["Status"], STATUS_VALUES)
    if unknown_status:
        result.warnings.append(f"Workers: Unknown status values treated as inactive: {unknown_status}")

    unknown_sex = _unknown_values(df["Sex"], SEX_VALUES)
    if unknown_sex:
        result.warnings.append(
            f"Workers: Unknown sex values {unknown_sex}. These workers are left out of room occupancy."
        )

    if "Age" in df.columns:
        missing_age = int(df["Age"].isna().sum())
        if missing_age:
            result.warnings.append(f"Workers: {missing_age} worker(s) without age, excluded from age statistics.")

    return result


def validate_rooms(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, ROOM_REQUIRED_COLUMNS, "Rooms")
    if not result.is_valid:
        return result

    if (df["Total Capacity"] < 0).any():
        result.is_valid = False
        result.errors.append("Rooms: Total Capacity cannot be negative.")

    if (df["Current Occupants"] < 0).any():
        result.is_valid = False
        result.errors.append("Rooms: Current Occupants cannot be negative.")

    dupes = df.duplicated(subset=["Room ID"], keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(f"Rooms: Duplicate room ids: {df[dupes]['Room ID'].unique().tolist()}")

    key_dupes = df.duplicated(subset=["Farm ID", "Room Number", "Gender"], keep=False)
    if key_dupes.any():
        dupe_rows = df[key_dupes][["Farm ID", "Room Number", "Gender"]].drop_duplicates().to_dict("records")
        result.warnings.append(f"Rooms: Several rooms share farm, number and gender: {dupe_rows}")

    unknown_gender = _unknown_values(df["Gender"], ROOM_GENDER_VALUES)
    if unknown_gender:
        result.warnings.append(f"Rooms: Unknown gender values {unknown_gender}. No worker will match these rooms.")

    return result


def validate_farms(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, FARM_REQUIRED_COLUMNS, "Farms")
    if not result.is_valid:
        return result

    dupes = df.duplicated(subset=["Farm ID"], keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(f"Farms: Duplicate farm ids: {df[dupes]['Farm ID'].unique().tolist()}")
    return result


def validate_cross_file(workers_df: pd.DataFrame, rooms_df: pd.DataFrame, farms_df: pd.DataFrame) -> ValidationResult:
    """Check that farm ids referenced by workers and rooms exist."""
    result = ValidationResult()
    farm_ids = set(farms_df["Farm ID"].dropna().astype(str).str.strip())
    worker_farms = set(workers_df["Farm ID"].dropna().astype(str).str.strip())
    room_farms = set(rooms_df["Farm ID"].dropna().astype(str).str.strip())

    unknown = (worker_farms | room_farms) - farm_ids
    if unknown:
        result.warnings.append(
            f"Farm ids not present in the farm list: {', '.join(sorted(unknown))}. "
            "They will appear without a farm name."
        )
    return result
