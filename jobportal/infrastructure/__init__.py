"""Infrastructure adapters and providers."""
