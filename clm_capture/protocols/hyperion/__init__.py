from .extractor import HyperionExtractor

__all__ = ["HyperionExtractor"]
