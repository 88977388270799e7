from .extractor import RaydiumExtractor

__all__ = ["RaydiumExtractor"]
