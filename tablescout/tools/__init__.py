"""
Search tools the assistant can call mid-conversation.

Responsibilities:
- Reddit (community discussion) search with a cached OAuth token.
- Brave web search with an optional focus hint.
- Bounded, concurrent execution of a turn's tool calls with error-shaped
  fallbacks instead of exceptions.
"""
