import math
from datetime import date as Date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from exercise_log import DATE_FORMAT

# BSON stores integers as signed 64-bit
MAX_DURATION = 2**63 - 1


class UserCreate(BaseModel):
    username: str = Field(min_length=1)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username must not be blank")
        return v


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    username: str


class ExerciseCreate(BaseModel):
    description: str = Field(min_length=1)
    duration: Union[int, float]
    date: Optional[Date] = None

    @field_validator("duration", mode="before")
    @classmethod
    def parse_duration(cls, v):
        # JSON true/false would otherwise coerce to 1/0
        if isinstance(v, bool):
            raise ValueError("duration must be a number")
        if isinstance(v, str):
            text = v.strip()
            try:
                v = int(text)
            except ValueError:
                try:
                    v = float(text)
                except ValueError:
                    raise ValueError("duration must be a number")
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("duration must be a finite number")
        if isinstance(v, (int, float)) and not 0 <= v <= MAX_DURATION:
            raise ValueError(f"duration must be between 0 and {MAX_DURATION}")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        # Empty form fields mean "today".
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, str):
            v = v.strip()
            try:
                return datetime.strptime(v, DATE_FORMAT).date()
            except ValueError:
                pass
            # "2024-01-01T10:00:00" and friends
            try:
                return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
            except ValueError:
                return v
        return v


class ExerciseResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    description: str
    duration: Union[int, float]
    date: str
    id: str = Field(alias="_id")  # the user's id, not the exercise's


class LogEntry(BaseModel):
    description: str
    duration: Union[int, float]
    date: str


class LogResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    count: int
    id: str = Field(alias="_id")
    log: List[LogEntry] = []
