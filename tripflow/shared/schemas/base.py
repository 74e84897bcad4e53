"""
Building blocks shared by every workflow state.

Workflow states are composed, not subclassed: each state embeds an
ExecutionStatus and delegates copy-on-write merging to merge_state().
"""

from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field


StateT = TypeVar("StateT", bound=BaseModel)


class ExecutionStatus(BaseModel):
    """Progress markers written by each node as a pipeline advances."""

    model_config = ConfigDict(frozen=True)

    current_step: str = "initialized"
    progress: int = Field(default=0, ge=0, le=100)
    progress_message: str = ""
    errors: List[str] = Field(default_factory=list)

    def advance(self, step: str, progress: int, message: str = "") -> "ExecutionStatus":
        """Return a copy moved to the given step and progress."""
        return self.model_copy(
            update={"current_step": step, "progress": progress, "progress_message": message}
        )

    def with_error(self, error: str) -> "ExecutionStatus":
        """Return a copy with one more recorded error."""
        return self.model_copy(update={"errors": [*self.errors, error]})


def merge_state(state: StateT, update: Dict[str, Any]) -> StateT:
    """
    Apply a partial update to a state, producing a new validated instance.

    The input state is never modified. Unknown keys and wrongly typed
    values raise pydantic.ValidationError.
    """
    data = state.model_dump()
    data.update(update)
    return type(state).model_validate(data)


def get_field(state: BaseModel, field: str) -> Any:
    """Typed field access; unknown names raise KeyError."""
    if field not in type(state).model_fields:
        raise KeyError(f"{type(state).__name__} has no field '{field}'")
    return getattr(state, field)


def default_of(schema: Type[BaseModel], field: str) -> Any:
    """Documented default of a state field."""
    return schema.model_fields[field].get_default(call_default_factory=True)
