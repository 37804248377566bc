"""Scheduling module for periodic connector work."""

from .poller import Poller

__all__ = ["Poller"]
