"""TableScout: a restaurant-recommendation chat assistant backed by LLM tool calling."""
