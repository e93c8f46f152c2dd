"""
binman-renovate

Renovate configuration for binman.yaml manifests and the regex manager rule
that extracts pinned binary versions from them.
"""

__version__ = "0.1.0"

from .config import RenovateConfig, Settings, build_renovate_config, get_settings
from .exceptions import BinmanRenovateError
from .logging_setup import setup_logging
from .managers import ExtractedDependency, ExtractionRule

__all__ = [
    "BinmanRenovateError",
    "ExtractedDependency",
    "ExtractionRule",
    "RenovateConfig",
    "Settings",
    "build_renovate_config",
    "get_settings",
    "setup_logging",
]
