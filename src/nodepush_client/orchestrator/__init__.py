"""Orchestration of the nodepush sample pipeline."""

from .push_orchestrator import PushOrchestrator, create_default_orchestrator

__all__ = ["PushOrchestrator", "create_default_orchestrator"]
