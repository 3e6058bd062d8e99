"""Orchestrator record models."""
