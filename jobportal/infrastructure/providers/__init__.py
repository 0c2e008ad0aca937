"""Singleton providers wiring adapters into application services."""
