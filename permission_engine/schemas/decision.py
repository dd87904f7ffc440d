"""Decision endpoint schemas."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field

from permission_engine.services.evaluator import DecisionOutcome


class InstanceReference(BaseModel):
    resource_type: str = Field(..., min_length=1)
    resource_id: Union[int, str]
    action: str = Field(..., min_length=1)


class DecisionRequest(BaseModel):
    user_id: int
    reference: Union[str, InstanceReference] = Field(
        ...,
        description="Permission name, 'resource:action' string, or an instance reference.",
    )


class DecisionResponse(BaseModel):
    allowed: bool
    outcome: DecisionOutcome
    resource: Optional[str] = None
    action: Optional[str] = None
