"""
Pydantic schemas for couple parsing

These define the structure the extraction model must return when turning a
planner's free-text note into couple records.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class CoupleData(BaseModel):
    """Fields that prefill the couple editor"""
    couple_names: str = Field(
        default="",
        description='Couple names formatted as "Name1 & Name2"'
    )
    couple_email: Optional[str] = Field(default=None, description="Email for invitations")
    wedding_date: Optional[str] = Field(default=None, description="Wedding date as YYYY-MM-DD")
    wedding_location: Optional[str] = Field(default=None, description="City or region")
    venue_name: Optional[str] = Field(default=None, description="Specific venue")
    notes: Optional[str] = Field(default=None, description="Any other planner context")


class ParsedCoupleOperation(BaseModel):
    """One create/update the planner can confirm in the editor"""
    action: Literal['create', 'update'] = 'create'
    couple_id: Optional[str] = Field(
        default=None,
        description="Existing couple id when action is 'update'"
    )
    couple_data: CoupleData
    confidence: float = Field(ge=0.0, le=1.0, default=0.8)
    ambiguous_fields: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class Clarification(BaseModel):
    """A question the planner must answer before the record is complete"""
    question: str
    field: Optional[str] = None
    field_type: Optional[str] = None
    operation_index: Optional[int] = None
    required: bool = False
    context: Optional[str] = None


class CoupleParseResult(BaseModel):
    """Everything extracted from one piece of free text"""
    operations: List[ParsedCoupleOperation] = Field(default_factory=list)
    clarifications_needed: List[Clarification] = Field(default_factory=list)
    processing_time_ms: int = 0
