from .extractor import PancakeSwapExtractor

__all__ = ["PancakeSwapExtractor"]
