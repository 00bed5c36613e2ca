"""Shared utilities: exceptions and XML serialization."""
