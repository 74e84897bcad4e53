"""Workflow state records."""

from tripflow.shared.schemas.base import ExecutionStatus, merge_state
from tripflow.shared.schemas.plan_state import PlanRequest, PlanState

__all__ = ["ExecutionStatus", "PlanRequest", "PlanState", "merge_state"]
