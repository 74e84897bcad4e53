"""
Capability base class and structured outcomes.

A capability wraps one external action behind a uniform interface.
invoke() never raises: every exception is converted into a failed
Outcome at this boundary so callers only ever branch on outcome.success.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


class CapabilityCategory(str, Enum):
    KNOWLEDGE_RETRIEVAL = "knowledge_retrieval"
    GEOCODING = "geocoding"
    VALIDATION = "validation"
    SEARCH = "search"
    GENERATION = "generation"


@dataclass
class Outcome:
    """Structured result of a capability call."""

    capability: str
    success: bool
    data: Any = None
    observation: str = ""
    error: Optional[str] = None
    duration_ms: int = 0

    @classmethod
    def ok(cls, capability: str, data: Any, observation: str) -> "Outcome":
        return cls(capability=capability, success=True, data=data, observation=observation)

    @classmethod
    def failure(cls, capability: str, error: str, data: Any = None) -> "Outcome":
        return cls(
            capability=capability,
            success=False,
            data=data,
            observation=f"Error: {error}",
            error=error,
        )


class Capability(ABC):
    """
    Base class for registry capabilities.

    Subclasses set name, description and category and implement _run().
    """

    name: str = ""
    description: str = ""
    category: CapabilityCategory = CapabilityCategory.SEARCH
    parallelizable: bool = True

    async def invoke(self, params: Optional[Dict[str, Any]] = None) -> Outcome:
        """Run the capability, converting any exception into a failed Outcome."""
        started = time.perf_counter()
        try:
            outcome = await self._run(params or {})
        except Exception as e:
            logger.exception(f"[capability={self.name}] Failed: {e}")
            outcome = Outcome.failure(self.name, f"{type(e).__name__}: {e}")
        outcome.duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            f"[capability={self.name}] success={outcome.success}, "
            f"duration={outcome.duration_ms}ms"
        )
        return outcome

    @abstractmethod
    async def _run(self, params: Dict[str, Any]) -> Outcome:
        raise NotImplementedError

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "parallelizable": self.parallelizable,
        }
