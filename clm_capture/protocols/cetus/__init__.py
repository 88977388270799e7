from .extractor import CetusExtractor

__all__ = ["CetusExtractor"]
