from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RevisionDecisionItem(BaseModel):
    """One human decision for an escalated revision match."""

    match_id: UUID = Field(..., description="RevisionMatch being resolved")
    # Validated by the resolver so bad values are reported with their match id
    decision: str = Field(..., description="MAP, CREATE_NEW, KEEP or ARCHIVE")
    department_id: Optional[UUID] = Field(None, description="Department to assign, if any")


class RevisionMatchRead(BaseModel):
    """A pending or resolved revision match."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    new_script_id: UUID
    detected_name: str
    detected_type: str
    detected_page: Optional[int] = None
    detected_highlight_text: Optional[str] = None
    match_status: str
    old_element_id: Optional[UUID] = None
    similarity: Optional[float] = None
    user_decision: Optional[str] = None
    resolved: bool
    created_at: datetime
