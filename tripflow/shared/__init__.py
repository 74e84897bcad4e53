"""
Shared infrastructure for all pipelines.

Modules:
- llm: OpenAI chat collaborator with retry and timeout handling
- logging: Structured JSON logging
- contracts: Itinerary, budget, geo, knowledge and validation records
- schemas: Workflow state records (PlanState, ExecutionStatus)
- cache: Session-keyed conversational memory
- parsing: JSON extraction from LLM responses
"""

from tripflow.shared.cache import ConversationMemory, SessionMemoryCache
from tripflow.shared.logging.config import setup_logging, log_state_transition
from tripflow.shared.schemas import PlanRequest, PlanState

__all__ = [
    "ConversationMemory",
    "PlanRequest",
    "PlanState",
    "SessionMemoryCache",
    "setup_logging",
    "log_state_transition",
]
