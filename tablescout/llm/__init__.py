"""
LLM provider layer.

Responsibilities:
- Hold provider credentials and generation settings.
- Adapt each backend (native function calling or the SEARCH_NEEDED text
  convention) to one begin/finish turn contract.
- Classify provider failures into typed error kinds.
- Order available providers by priority and fail over between them.
"""
