from typing import Optional
from pydantic import BaseModel

class ActivityCreate(BaseModel):
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    target_value: Optional[float] = None
    target_unit: Optional[str] = None
    category: Optional[str] = "exercise"

class ActivityUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    target_value: Optional[float] = None
    target_unit: Optional[str] = None
    category: Optional[str] = None

class ActivityOut(BaseModel):
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    target_value: Optional[float] = None
    target_unit: Optional[str] = None
    category: Optional[str] = None
    is_active: bool
    created_at: Optional[str] = None

class ActivityLogIn(BaseModel):
    completed: bool
    actual_value: Optional[float] = None
    notes: Optional[str] = None

class LogEntry(BaseModel):
    completed: bool
    actual_value: Optional[float] = None
    notes: Optional[str] = None

class WorkoutCreate(BaseModel):
    workout_type: str
    session_date: str
    duration_minutes: Optional[int] = None
    calories_burned: Optional[float] = None
    intensity: Optional[str] = None
    notes: Optional[str] = None

class WorkoutOut(WorkoutCreate):
    id: int
    user_id: int
    created_at: Optional[str] = None

class MeasurementCreate(BaseModel):
    measurement_date: str
    weight: Optional[float] = None
    body_fat_percentage: Optional[float] = None
    muscle_mass: Optional[float] = None
    waist_circumference: Optional[float] = None

class MeasurementOut(MeasurementCreate):
    id: int
    user_id: int
    created_at: Optional[str] = None
