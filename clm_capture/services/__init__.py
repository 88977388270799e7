"""Service layer: capture orchestration and history reads."""
from .capture import CaptureResult, CaptureService
from .history import HistoryService

__all__ = ["CaptureResult", "CaptureService", "HistoryService"]
