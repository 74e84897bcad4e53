"""ReAct (reason/act/observe) planning loop."""

from tripflow.react.actions import parse_action
from tripflow.react.agent import ReActAgent
from tripflow.react.config import ReActConfig
from tripflow.react.schemas import ReActStep
from tripflow.react.termination import TerminationReason, check_termination, detect_loop

__all__ = [
    "ReActAgent",
    "ReActConfig",
    "ReActStep",
    "TerminationReason",
    "check_termination",
    "detect_loop",
    "parse_action",
]
