"""
Unit tests package.

Tests for the validator, document assembler, serializer, certificate
loading, configuration, logging, and CLI commands in isolation.
"""
