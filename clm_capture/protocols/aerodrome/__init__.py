from .extractor import AerodromeExtractor

__all__ = ["AerodromeExtractor"]
