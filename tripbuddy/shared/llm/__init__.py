"""LLM client utilities."""

from tripbuddy.shared.llm.client import create_client, call_llm_with_usage

__all__ = ["create_client", "call_llm_with_usage"]
