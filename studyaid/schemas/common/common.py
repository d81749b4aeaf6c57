# studyaid/schemas/common/common.py
from pydantic import BaseModel, ConfigDict
from typing import Any, Optional
from enum import Enum

class ErrorResponse(BaseModel):
    success: bool = False
    data: Optional[Any] = None
    error: str

class SubjectOption(BaseModel):
    value: str
    label: str

class SessionStatus(str, Enum):
    IDLE = "IDLE"
    REQUESTING = "REQUESTING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"

class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire and in storage."""
    model_config = ConfigDict(populate_by_name=True)
