"""Decision endpoint for out-of-process checkpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from permission_engine.api.dependencies import get_decision_evaluator
from permission_engine.schemas.decision import DecisionRequest, DecisionResponse, InstanceReference
from permission_engine.services.evaluator import ByInstance, DecisionEvaluator

router = APIRouter()


@router.post(
    "",
    response_model=DecisionResponse,
)
def evaluate_decision(
    payload: DecisionRequest,
    evaluator: DecisionEvaluator = Depends(get_decision_evaluator),
) -> DecisionResponse:
    reference = payload.reference
    if isinstance(reference, InstanceReference):
        reference = ByInstance(reference.resource_type, reference.resource_id, reference.action)
    decision = evaluator.evaluate(payload.user_id, reference)
    return DecisionResponse(
        allowed=decision.allowed,
        outcome=decision.outcome,
        resource=decision.resource,
        action=decision.action,
    )
