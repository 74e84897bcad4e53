"""
Configuration for the capability registry.

Centralizes thresholds, caps and timeouts so they can be tuned without
touching capability code.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CapabilityConfig:
    """
    Attributes:
        min_relevance_score: Knowledge records must score strictly above this
        default_max_results: Knowledge search cap when the caller gives none
        knowledge_timeout: Seconds allowed per knowledge search attempt
        knowledge_retries: Attempts before degrading to an empty result
        call_timeout: Seconds allowed per registry invocation
        nearby_limit: Maximum points of interest returned by nearby search
        default_radius_km: Nearby search radius when none (or <= 0) is given
    """

    min_relevance_score: float = 0.7
    default_max_results: int = 10
    knowledge_timeout: float = 10.0
    knowledge_retries: int = 3
    retry_min_wait: float = 1.0  # seconds
    retry_max_wait: float = 4.0  # seconds
    call_timeout: float = 30.0
    nearby_limit: int = 10
    default_radius_km: float = 1.0


DEFAULT_CONFIG = CapabilityConfig()


def get_config(
    min_relevance_score: Optional[float] = None,
    default_max_results: Optional[int] = None,
    knowledge_timeout: Optional[float] = None,
    knowledge_retries: Optional[int] = None,
    call_timeout: Optional[float] = None,
    retry_min_wait: Optional[float] = None,
    retry_max_wait: Optional[float] = None,
) -> CapabilityConfig:
    """
    Create a configuration with optional overrides.

    Returns:
        CapabilityConfig with specified overrides applied
    """
    return CapabilityConfig(
        min_relevance_score=min_relevance_score
        if min_relevance_score is not None
        else DEFAULT_CONFIG.min_relevance_score,
        default_max_results=default_max_results
        if default_max_results is not None
        else DEFAULT_CONFIG.default_max_results,
        knowledge_timeout=knowledge_timeout
        if knowledge_timeout is not None
        else DEFAULT_CONFIG.knowledge_timeout,
        knowledge_retries=knowledge_retries
        if knowledge_retries is not None
        else DEFAULT_CONFIG.knowledge_retries,
        call_timeout=call_timeout
        if call_timeout is not None
        else DEFAULT_CONFIG.call_timeout,
        retry_min_wait=retry_min_wait
        if retry_min_wait is not None
        else DEFAULT_CONFIG.retry_min_wait,
        retry_max_wait=retry_max_wait
        if retry_max_wait is not None
        else DEFAULT_CONFIG.retry_max_wait,
    )
