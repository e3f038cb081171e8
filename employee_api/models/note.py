# employee_api/models/note.py - Note schemas

from pydantic import BaseModel, Field, model_validator


class NoteCreate(BaseModel):
    message: str = Field(min_length=1)
    to_employee_id: int | None = None
    to_all: bool = False

    @model_validator(mode="after")
    def _check_target(self) -> "NoteCreate":
        if not self.to_all and self.to_employee_id is None:
            raise ValueError("Provide to_employee_id or set to_all")
        return self
