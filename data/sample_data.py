"""Generate synthetic farm housing datasets for the dashboard."""

import pandas as pd
import random
import os
from datetime import datetime, timedelta
from typing import Optional

FARMS = [("F1", "North Orchard"), ("F2", "River Greenhouses"), ("F3", "Hillside Vineyard")]
ROOMS_PER_GENDER = 6
EXIT_REASONS = ["contract_end", "personal", "health", "dismissal", None]
FIRST_NAMES = {
    "male": ["Youssef", "Omar", "Karim", "Hassan", "Mehdi", "Said", "Rachid", "Amine"],
    "female": ["Fatima", "Khadija", "Salma", "Nadia", "Imane", "Sara", "Laila", "Hind"],
}
LAST_NAMES = ["Alaoui", "Bennani", "Chraibi", "Idrissi", "Tazi", "Berrada", "Fassi", "Amrani"]


def generate_farms_df() -> pd.DataFrame:
    return pd.DataFrame([{"Farm ID": f_id, "Farm Name": name} for f_id, name in FARMS])


def generate_rooms_df() -> pd.DataFrame:
    """Rooms numbered 1..N per farm and gender, capacities 4-8. Occupants are filled in later."""
    random.seed(42)
    rows = []
    for f_id, _ in FARMS:
        for gender in ["male", "female"]:
            for number in range(1, ROOMS_PER_GENDER + 1):
                rows.append({
                    "Room ID": f"{f_id}-{gender[0].upper()}{number}",
                    "Farm ID": f_id,
                    "Room Number": str(number),
                    "Gender": gender,
                    "Total Capacity": random.choice([4, 6, 6, 8]),
                    "Current Occupants": 0,
                })
    return pd.DataFrame(rows)


def generate_workers_df(rooms_df: pd.DataFrame, today: Optional[datetime] = None) -> pd.DataFrame:
    """Workers spread over the rooms, with some unhoused and some departed."""
    random.seed(7)
    today = today or datetime.now()
    rows = []
    worker_no = 0
    for _, room in rooms_df.iterrows():
        occupants = random.randint(0, int(room["Total Capacity"]))
        for _ in range(occupants):
            worker_no += 1
            rows.append(_worker_row(worker_no, room["Farm ID"], room["Gender"], room["Room Number"], today))

    # Unhoused and departed workers
    for f_id, _ in FARMS:
        for _ in range(4):
            worker_no += 1
            rows.append(_worker_row(worker_no, f_id, random.choice(["male", "female"]), None, today))
        for _ in range(8):
            worker_no += 1
            row = _worker_row(worker_no, f_id, random.choice(["male", "female"]), None, today)
            entry = row["Entry Date"]
            row["Status"] = "inactive"
            row["Exit Date"] = entry + timedelta(days=random.randint(20, 400))
            if row["Exit Date"] > today:
                row["Exit Date"] = today - timedelta(days=random.randint(0, 60))
            row["Exit Reason"] = random.choice(EXIT_REASONS)
            rows.append(row)
    return pd.DataFrame(rows)


def _worker_row(worker_no: int, farm_id: str, sex: str, room_number, today: datetime) -> dict:
    return {
        "Worker ID": f"W{worker_no:04d}",
        "Full Name": f"{random.choice(FIRST_NAMES[sex])} {random.choice(LAST_NAMES)}",
        "Farm ID": farm_id,
        "Status": "active",
        "Sex": sex,
        "Age": random.randint(18, 60),
        "Entry Date": today - timedelta(days=random.randint(1, 500)),
        "Exit Date": None,
        "Exit Reason": None,
        "Room Number": room_number,
    }


def apply_counter_drift(rooms_df: pd.DataFrame, workers_df: pd.DataFrame, drift_rooms: int = 5) -> pd.DataFrame:
    """Set each room's counter from its workers, then knock a few counters out of sync."""
    random.seed(11)
    active = workers_df[(workers_df["Status"] == "active") & workers_df["Room Number"].notna()]
    counts = active.groupby(["Farm ID", "Room Number", "Sex"]).size().to_dict()

    rooms_df = rooms_df.copy()
    rooms_df["Current Occupants"] = [
        counts.get((r["Farm ID"], r["Room Number"], r["Gender"]), 0) for _, r in rooms_df.iterrows()
    ]
    for idx in random.sample(list(rooms_df.index), min(drift_rooms, len(rooms_df))):
        current = int(rooms_df.at[idx, "Current Occupants"])
        rooms_df.at[idx, "Current Occupants"] = max(0, current + random.choice([-2, -1, 1, 2]))
    return rooms_df


def generate_sample_dataset(today: Optional[datetime] = None):
    """Return (workers_df, rooms_df, farms_df) with a handful of drifted room counters."""
    rooms_df = generate_rooms_df()
    workers_df = generate_workers_df(rooms_df, today)
    rooms_df = apply_counter_drift(rooms_df, workers_df)
    return workers_df, rooms_df, generate_farms_df()


def generate_sample_excel(output_dir: str):
    """Write a single multi-tab Excel file with all three datasets."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "sample_data.xlsx")
    workers_df, rooms_df, farms_df = generate_sample_dataset()
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        workers_df.to_excel(writer, sheet_name="Workers", index=False)
        rooms_df.to_excel(writer, sheet_name="Rooms", index=False)
        farms_df.to_excel(writer, sheet_name="Farms", index=False)


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_files")
    generate_sample_excel(out)
    print("Sample Excel file generated in sample_files/")
