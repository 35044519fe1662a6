
from typing import Dict, List
from pydantic import BaseModel
from fitness_tracker.schemas.activity_schema import LogEntry

class ActivityStat(BaseModel):
    activity_id: int
    name: str
    category: str | None = None
    completed_count: int
    total_count: int
    completion_rate: float   # %, 로그가 없으면 0.0

class StatsResponse(BaseModel):
    start_date: str
    end_date: str
    stats: List[ActivityStat]

class DayLogsResponse(BaseModel):
    date: str
    logs: Dict[int, LogEntry]

class IdResponse(BaseModel):
    id: int

class MessageResponse(BaseModel):
    message: str
