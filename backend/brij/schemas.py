from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ValidateRequest(BaseModel):
    content: Any = None


class ValidationOut(BaseModel):
    valid: bool
    errors: Optional[list[str]] = None
    critical: Optional[str] = None


class ConditionOut(BaseModel):
    name: str
    additional_fields: list[str]


class RuleSetBase(BaseModel):
    name: str = Field(min_length=1)
    version: int = 1
    is_active: bool = True
    notes: Optional[str] = None


class RuleSetCreate(RuleSetBase):
    content: str


class RuleSetUpdate(BaseModel):
    is_active: Optional[bool] = None
    notes: Optional[str] = None


class RuleSetOut(RuleSetBase):
    id: int
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditOut(BaseModel):
    id: int
    timestamp: datetime
    document_id: Optional[int] = None
    event_type: str
    payload: dict[str, Any]
