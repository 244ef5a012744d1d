"""Tests for room key construction and worker-derived occupancy."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models.worker import Worker, normalize_sex
from models.room import Room
from engine.room_keys import (
    gender_restriction_for,
    room_key,
    worker_room_key,
    derive_room_occupancy,
    derive_room_occupants,
)


def make_worker(wid="W1", name="Omar Tazi", farm="F1", status="active", sex="male", room="101"):
    return Worker(wid, name, farm, status, sex, 30, assigned_room_number=room)


class TestRoomKey:
    def test_male_and_female_keys_differ(self):
        assert room_key("F1", "12", "male") == ("F1", "12", "male")
        assert room_key("F1", "12", "female") == ("F1", "12", "female")
        assert room_key("F1", "12", "male") != room_key("F1", "12", "female")

    def test_room_number_is_stripped(self):
        assert room_key("F1", " 12 ", "male") == ("F1", "12", "male")

    def test_sex_is_case_insensitive(self):
        assert gender_restriction_for("Female") == "female"

    def test_unusable_parts_give_no_key(self):
        assert room_key(None, "12", "male") is None
        assert room_key("F1", "", "male") is None
        assert room_key("F1", None, "male") is None
        assert room_key("F1", "12", "unknown") is None
        assert room_key("F1", "12", None) is None

    def test_matches_room_key_property(self):
        room = Room("R1", "F1", "101", "male", 4, 0)
        assert worker_room_key(make_worker()) == room.key

    def test_room_key_normalizes_gender(self):
        room = Room("R1", "F1", " 101", "Female ", 4, 0)
        assert room.key == ("F1", "101", "female")
        assert worker_room_key(make_worker(sex="FEMALE")) == room.key

    def test_normalize_sex(self):
        assert normalize_sex(" Male") == "male"
        assert normalize_sex("female") == "female"
        assert normalize_sex("") is None
        assert normalize_sex("other") is None
        assert normalize_sex(None) is None


class TestWorkerRoomKey:
    def test_inactive_worker_has_no_key(self):
        assert worker_room_key(make_worker(status="inactive")) is None

    def test_unhoused_worker_has_no_key(self):
        assert worker_room_key(make_worker(room=None)) is None
        assert worker_room_key(make_worker(room="  ")) is None


class TestDeriveRoomOccupancy:
    def test_counts_per_key(self):
        workers = [
            make_worker("W1", room="1"),
            make_worker("W2", room="1"),
            make_worker("W3", sex="female", room="1"),
            make_worker("W4", farm="F2", room="1"),
        ]
        counts = derive_room_occupancy(workers)
        assert counts == {
            ("F1", "1", "male"): 2,
            ("F1", "1", "female"): 1,
            ("F2", "1", "male"): 1,
        }

    def test_skips_inactive_and_malformed(self):
        workers = [
            make_worker("W1", status="inactive"),
            make_worker("W2", sex=None),
            make_worker("W3", farm=None),
        ]
        assert derive_room_occupancy(workers) == {}

    def test_none_input(self):
        assert derive_room_occupancy(None) == {}

    def test_occupant_names_in_worker_order(self):
        workers = [make_worker("W1", name="B"), make_worker("W2", name="A")]
        assert derive_room_occupants(workers) == {("F1", "101", "male"): ["B", "A"]}


if __name__ == "__main__":
    import pytest
    pytest.main([__file__, "-v"])
