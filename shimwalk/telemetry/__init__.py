"""Trace logging for resolution runs."""

from .logger import ResolutionLogger

__all__ = ["ResolutionLogger"]
