"""Protocol interfaces for the capture engine."""
from .extractor import Extractor
from .notifier import Notifier
from .page_source import PageSource
from .store import CaptureStore

__all__ = ["CaptureStore", "Extractor", "Notifier", "PageSource"]
