"""
Capability registry.

Holds capabilities by unique name, renders the menu shown in reasoning
prompts, and dispatches invocations with a per-call timeout. Lookups of
unknown names and timeouts come back as failed outcomes, never raise.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from tripflow.shared.concurrency import gather_joined
from tripflow.tools.base import Capability, Outcome
from tripflow.tools.config import CapabilityConfig, DEFAULT_CONFIG


logger = logging.getLogger(__name__)

CapabilityCall = Tuple[str, Dict[str, Any]]


class CapabilityRegistry:
    """Name-keyed collection of capabilities."""

    def __init__(self, config: Optional[CapabilityConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._capabilities: Dict[str, Capability] = {}

    def register(self, capability: Capability) -> "CapabilityRegistry":
        if not capability.name:
            raise ValueError(f"{type(capability).__name__} has no name")
        if capability.name in self._capabilities:
            raise ValueError(f"Capability '{capability.name}' is already registered")
        self._capabilities[capability.name] = capability
        logger.debug(f"Registered capability '{capability.name}' ({capability.category.value})")
        return self

    def get(self, name: str) -> Optional[Capability]:
        return self._capabilities.get(name)

    def names(self) -> List[str]:
        return list(self._capabilities)

    def __contains__(self, name: str) -> bool:
        return name in self._capabilities

    def describe(self) -> List[Dict[str, Any]]:
        return [capability.describe() for capability in self._capabilities.values()]

    def menu_text(self) -> str:
        """Capability list formatted for inclusion in a reasoning prompt."""
        return "\n".join(
            f"- {c.name}: {c.description}" for c in self._capabilities.values()
        )

    async def invoke(self, name: str, params: Optional[Dict[str, Any]] = None) -> Outcome:
        """
        Invoke a capability by name.

        Returns:
            The capability's outcome, or a failed outcome for an unknown
            name or when the call exceeds the configured timeout
        """
        capability = self._capabilities.get(name)
        if capability is None:
            logger.warning(f"Unknown capability requested: '{name}'")
            return Outcome.failure(name, f"Unknown capability '{name}'")

        started = time.perf_counter()
        try:
            return await asyncio.wait_for(
                capability.invoke(params), timeout=self.config.call_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"[capability={name}] Timed out after {self.config.call_timeout}s"
            )
            outcome = Outcome.failure(
                name, f"Timed out after {self.config.call_timeout}s"
            )
            outcome.duration_ms = int((time.perf_counter() - started) * 1000)
            return outcome

    async def invoke_all(self, calls: Sequence[CapabilityCall]) -> List[Outcome]:
        """
        Invoke several capabilities, returning outcomes in call order.

        Parallelizable calls are fanned out concurrently and joined first;
        the rest then run one at a time.
        """
        results: List[Optional[Outcome]] = [None] * len(calls)

        parallel = [
            i for i, (name, _) in enumerate(calls)
            if name in self._capabilities and self._capabilities[name].parallelizable
        ]
        gathered = await gather_joined(
            self.invoke(calls[i][0], calls[i][1]) for i in parallel
        )
        for i, outcome in zip(parallel, gathered):
            if isinstance(outcome, BaseException):
                outcome = Outcome.failure(calls[i][0], f"{type(outcome).__name__}: {outcome}")
            results[i] = outcome

        for i, (name, params) in enumerate(calls):
            if results[i] is None:
                results[i] = await self.invoke(name, params)

        return results
