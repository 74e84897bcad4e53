"""LLM client utilities."""

from tripflow.shared.llm.client import OpenAIChatModel, get_cached_client

__all__ = ["OpenAIChatModel", "get_cached_client"]
