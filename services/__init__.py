"""Availability engine, use-case services and event adapters."""
