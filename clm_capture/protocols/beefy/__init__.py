from .extractor import BeefyExtractor

__all__ = ["BeefyExtractor"]
