"""File upload parsing — CSV/XLSX into typed record lists."""

import logging
import pandas as pd
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from models.worker import Worker
from models.room import Room
from models.farm import Farm

logger = logging.getLogger(__name__)

# Values exported by the older French-language admin screens
STATUS_VALUES = {"active": "active", "actif": "active", "inactive": "inactive", "inactif": "inactive"}
SEX_VALUES = {"male": "male", "m": "male", "homme": "male", "female": "female", "f": "female", "femme": "female"}
ROOM_GENDER_VALUES = {
    "male": "male", "males": "male", "men": "male", "hommes": "male", "homme": "male",
    "female": "female", "females": "female", "women": "female", "femmes": "female", "femme": "female",
}


def _text(row, column: str) -> Optional[str]:
    if column not in row.index or pd.isna(row[column]):
        return None
    value = str(row[column]).strip()
    return value or None


def _room_number(row, column: str) -> Optional[str]:
    """Room numbers read as floats by pandas ("12.0") are turned back into "12"."""
    if column not in row.index or pd.isna(row[column]):
        return None
    value = row[column]
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    value = str(value).strip()
    return value or None


def _int(row, column: str) -> Optional[int]:
    if column not in row.index or pd.isna(row[column]):
        return None
    try:
        return int(float(row[column]))
    except (ValueError, TypeError):
        return None


def _date(row, column: str) -> Optional[datetime]:
    if column not in row.index or pd.isna(row[column]):
        return None
    parsed = pd.to_datetime(row[column], errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime().replace(tzinfo=None)


def _vocab(value: Optional[str], mapping: Dict[str, str]) -> Optional[str]:
    if value is None:
        return None
    return mapping.get(value.lower(), value.lower())


def parse_workers(df: pd.DataFrame) -> List[Worker]:
    """Convert a workers DataFrame into Worker objects.

    Blank or unreadable cells become None; the record is kept so that metrics
    not needing the field still count it.
    """
    workers = []
    for idx, row in df.iterrows():
        worker_id = _text(row, "Worker ID") or f"row-{idx}"
        workers.append(Worker(
            worker_id=worker_id,
            full_name=_text(row, "Full Name") or worker_id,
            farm_id=_text(row, "Farm ID"),
            status=_vocab(_text(row, "Status"), STATUS_VALUES) or "inactive",
            sex=_vocab(_text(row, "Sex"), SEX_VALUES),
            age=_int(row, "Age"),
            entry_date=_date(row, "Entry Date"),
            exit_date=_date(row, "Exit Date"),
            exit_reason=_text(row, "Exit Reason"),
            assigned_room_number=_room_number(row, "Room Number"),
        ))
    return workers


def parse_rooms(df: pd.DataFrame) -> List[Room]:
    """Convert a rooms DataFrame into Room objects. Rows without an id or farm are skipped."""
    rooms = []
    for idx, row in df.iterrows():
        room_id = _text(row, "Room ID")
        farm_id = _text(row, "Farm ID")
        room_number = _room_number(row, "Room Number")
        if not room_id or not farm_id or room_number is None:
            logger.warning("Skipping room row %s: missing Room ID, Farm ID or Room Number", idx)
            continue
        rooms.append(Room(
            room_id=room_id,
            farm_id=farm_id,
            room_number=room_number,
            gender_restriction=_vocab(_text(row, "Gender"), ROOM_GENDER_VALUES),
            total_capacity=_int(row, "Total Capacity") or 0,
            stored_occupant_count=_int(row, "Current Occupants") or 0,
        ))
    return rooms


def parse_farms(df: pd.DataFrame) -> List[Farm]:
    """Convert a farms DataFrame into Farm objects."""
    farms = []
    for _, row in df.iterrows():
        farm_id = _text(row, "Farm ID")
        if not farm_id:
            continue
        farms.append(Farm(farm_id=farm_id, name=_text(row, "Farm Name") or farm_id))
    return farms


def load_file(uploaded_file) -> pd.DataFrame:
    """Load an uploaded file (CSV or XLSX) into a DataFrame."""
    name = uploaded_file.name.lower()
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file)
    elif name.endswith(".xlsx") or name.endswith(".xls"):
        return pd.read_excel(uploaded_file, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file format: {name}. Use CSV or XLSX.")


# Expected sheet names for multi-tab Excel (case-insensitive matching)
SHEET_ALIASES = {
    "workers": ["workers", "worker", "staff", "ouvriers", "ouvrier"],
    "rooms": ["rooms", "room", "dormitory", "chambres", "chambre"],
    "farms": ["farms", "farm", "sites", "fermes", "ferme"],
}


def _match_sheet(sheet_names: List[str], category: str) -> str:
    """Find a sheet name matching the given category. Returns the matched name or raises."""
    aliases = SHEET_ALIASES[category]
    lower_map = {s.lower().strip(): s for s in sheet_names}
    for alias in aliases:
        if alias in lower_map:
            return lower_map[alias]
    raise ValueError(
        f"Could not find a sheet for '{category}'. "
        f"Expected one of: {aliases}. "
        f"Found sheets: {sheet_names}"
    )


def load_multi_sheet_excel(uploaded_file) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """Load a single Excel file with 3 tabs: Workers, Rooms, Farms.

    Sheet names are matched case-insensitively, French names included.

    Returns (workers_df, rooms_df, farms_df).
    """
    xl = pd.ExcelFile(uploaded_file, engine="openpyxl")
    sheet_names = xl.sheet_names

    workers_df = pd.read_excel(xl, sheet_name=_match_sheet(sheet_names, "workers"))
    rooms_df = pd.read_excel(xl, sheet_name=_match_sheet(sheet_names, "rooms"))
    farms_df = pd.read_excel(xl, sheet_name=_match_sheet(sheet_names, "farms"))

    return workers_df, rooms_df, farms_df
