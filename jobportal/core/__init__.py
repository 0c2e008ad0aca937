"""Configuration, constants and request dependencies."""
