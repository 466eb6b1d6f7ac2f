"""Orchestrator package - coordinates the create and poll workflow."""
from .core import ESDocUploader
from .polling import PollOutcome, StatusPoller

__all__ = ["ESDocUploader", "PollOutcome", "StatusPoller"]
