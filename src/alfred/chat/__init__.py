"""Conversation orchestration."""

from .orchestrator import ChatOrchestrator

__all__ = ["ChatOrchestrator"]
