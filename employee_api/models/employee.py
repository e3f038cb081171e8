# employee_api/models/employee.py - Employee schemas

from typing import Literal

from pydantic import BaseModel, Field

EmployeeStatus = Literal["active", "inactive", "terminated"]
EmployeeSortBy = Literal["NAME", "AGE", "ATTENDANCE", "CREATED_AT"]


class EmployeeBase(BaseModel):
    name: str = Field(min_length=1)
    email: str | None = None
    age: int = Field(ge=0, le=150)
    class_name: str
    subjects: list[str] = Field(default_factory=list)
    attendance: int = Field(default=0, ge=0, le=100)
    role: str = "employee"
    status: EmployeeStatus = "active"
    location: str = ""
    last_login: str = ""
    flagged: bool = False
    avatar: str | None = None
    manager_id: int | None = None


class EmployeeCreate(EmployeeBase):
    user_id: int | None = None


class EmployeeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    class_name: str | None = None
    subjects: list[str] | None = None
    attendance: int | None = Field(default=None, ge=0, le=100)
    role: str | None = None
    status: EmployeeStatus | None = None
    location: str | None = None
    last_login: str | None = None
    flagged: bool | None = None
    avatar: str | None = None
    manager_id: int | None = None


class ProfileUpdate(BaseModel):
    """Fields an employee may change on their own record."""

    name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    location: str | None = None
    avatar: str | None = None


class EmployeeFilter(BaseModel):
    name_contains: str | None = None
    class_name: str | None = None
    status: EmployeeStatus | None = None
    role_not: str | None = None


class EmployeeImportRow(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    age: int = Field(default=0, ge=0, le=150)
    role: str = "employee"
    status: EmployeeStatus = "active"
    location: str = ""
    attendance: int = Field(default=0, ge=0, le=100)
