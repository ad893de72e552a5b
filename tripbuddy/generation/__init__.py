"""
Server-side generation pipeline.

Modules:
- invoker: One chat completion call per candidate model
- response_parser: JSON recovery from raw model text
- validator: Itinerary completeness check and bounded repair
- sanitizer: First-person rewrites for accepted itineraries
- graph / nodes: LangGraph fallback loop over model candidates
- orchestrator: FallbackOrchestrator, the entry point used by the API
- generation_api: FastAPI endpoint
"""
