"""Generation model adapters."""
