from .extractor import OrcaExtractor

__all__ = ["OrcaExtractor"]
