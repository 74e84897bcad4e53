"""ReAct step records."""

from pydantic import BaseModel


class ReActStep(BaseModel):
    """One think/act/observe iteration."""

    iteration: int
    thought: str
    action: str
    observation: str
    success: bool
