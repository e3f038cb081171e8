# employee_api/models/leave_request.py - Leave request schemas

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, model_validator

LeaveStatus = Literal["pending", "approved", "rejected"]
LeaveType = Literal["annual", "sick", "personal", "unpaid", "other"]


class LeaveRequestCreate(BaseModel):
    start_date: date
    end_date: date
    type: LeaveType = "annual"
    reason: str = Field(min_length=1)

    @model_validator(mode="after")
    def _check_dates(self) -> "LeaveRequestCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self
