"""
Knowledge search capability.

Queries the knowledge collaborator for attractions and keeps only the
records whose similarity score clears the relevance threshold. Each
attempt has a timeout; failed attempts are retried a few times before the
search degrades to an empty result.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from tripflow.shared.collaborators import KnowledgeBase
from tripflow.shared.contracts import Attraction, KnowledgeRecord
from tripflow.tools.base import Capability, CapabilityCategory, Outcome
from tripflow.tools.config import CapabilityConfig, DEFAULT_CONFIG


logger = logging.getLogger(__name__)


class KnowledgeSearchCapability(Capability):
    name = "search_attractions"
    description = (
        "Search the travel knowledge base for attractions at the destination. "
        "Use this first to gather candidate activities."
    )
    category = CapabilityCategory.KNOWLEDGE_RETRIEVAL

    def __init__(self, knowledge_base: KnowledgeBase, config: Optional[CapabilityConfig] = None):
        self.knowledge_base = knowledge_base
        self.config = config or DEFAULT_CONFIG

    async def _search(self, query: str, max_results: int) -> List[Any]:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.config.knowledge_retries),
            wait=wait_exponential(
                multiplier=1,
                min=self.config.retry_min_wait,
                max=self.config.retry_max_wait,
            ),
            retry=retry_if_exception_type(Exception),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.info(
                        f"[capability={self.name}] Retry attempt "
                        f"{attempt.retry_state.attempt_number} for query={query!r}"
                    )
                return await asyncio.wait_for(
                    self.knowledge_base.search_knowledge(query, max_results),
                    timeout=self.config.knowledge_timeout,
                )
        return []

    async def _run(self, params: Dict[str, Any]) -> Outcome:
        query = params.get("query") or params.get("destination") or ""
        if not query:
            return Outcome.failure(self.name, "No query provided", data=[])
        max_results = int(params.get("max_results") or self.config.default_max_results)
        category = params.get("category")

        try:
            raw_records = await self._search(query, max_results)
        except Exception as e:
            logger.warning(
                f"[capability={self.name}] Search degraded to empty result after "
                f"{self.config.knowledge_retries} attempt(s): {type(e).__name__}: {e}"
            )
            return Outcome.failure(self.name, f"Knowledge search unavailable: {e}", data=[])

        records = [KnowledgeRecord.model_validate(r) for r in raw_records]
        attractions = [
            Attraction.from_record(r)
            for r in records
            if r.score > self.config.min_relevance_score
            and (not category or r.category.lower() == str(category).lower())
        ][:max_results]

        logger.info(
            f"[capability={self.name}] query={query!r}: {len(records)} records, "
            f"{len(attractions)} above score {self.config.min_relevance_score}"
        )

        if not attractions:
            return Outcome.failure(self.name, "No attractions found", data=[])

        names = ", ".join(a.name for a in attractions[:5])
        return Outcome.ok(
            self.name,
            attractions,
            f"Found {len(attractions)} attractions: {names}",
        )
