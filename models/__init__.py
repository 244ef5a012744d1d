from models.worker import Worker
from models.room import Room, RoomKey
from models.farm import Farm
from models.occupancy import RoomInconsistency, RoomWriteFailure, SummaryReport, SyncResult
from models.metrics import MetricsSnapshot
