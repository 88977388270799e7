"""Per-protocol extractors."""
from .aerodrome import AerodromeExtractor
from .base import AnchorNotFoundError, BaseExtractor, PageContentError
from .beefy import BeefyExtractor
from .cetus import CetusExtractor
from .hyperion import HyperionExtractor
from .orca import OrcaExtractor
from .pancakeswap import PancakeSwapExtractor
from .raydium import RaydiumExtractor

__all__ = [
    "AerodromeExtractor",
    "AnchorNotFoundError",
    "BaseExtractor",
    "BeefyExtractor",
    "CetusExtractor",
    "HyperionExtractor",
    "OrcaExtractor",
    "PageContentError",
    "PancakeSwapExtractor",
    "RaydiumExtractor",
]
