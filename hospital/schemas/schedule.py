from datetime import time
from typing import List
from pydantic import BaseModel

from ..models.schedule import DayOfWeek


class ScheduleEntry(BaseModel):
    day_of_week: DayOfWeek
    start_time: time
    end_time: time


class ScheduleResponse(ScheduleEntry):
    id: int
    doctor_id: int

    class Config:
        from_attributes = True


class WeeklySchedule(BaseModel):
    entries: List[ScheduleEntry]
