"""
tinyshot_core package: compress captured pages into compact snapshots for LLM prompts

Usage:
    from tinyshot_core import compress, restore

    snapshot = compress(html, {"maxText": 1000, "maxElems": 15})
    payload = snapshot.to_json()
    outline = restore(snapshot)
"""
from .config import Config, config
from .cache import SnapshotCache, fingerprint
from .exceptions import TinyshotError, InputTooLarge, ParseFailure, SnapshotToolError
from .snapshot_types import CompactSnapshot, CompressionOptions, ElementKind, InteractiveElement
from .selectors import SelectorSynthesizer
from .extractor import (
    Tinyshot,
    DomStrategy,
    RegexStrategy,
    compress,
    restore,
    get_default_tinyshot,
    reset_default_tinyshot,
)

__all__ = [
    # Core
    "Config",
    "config",
    "Tinyshot",
    "compress",
    "restore",
    "get_default_tinyshot",
    "reset_default_tinyshot",
    # Data model
    "CompactSnapshot",
    "CompressionOptions",
    "ElementKind",
    "InteractiveElement",
    # Building blocks
    "SnapshotCache",
    "fingerprint",
    "SelectorSynthesizer",
    "DomStrategy",
    "RegexStrategy",
    # Errors
    "TinyshotError",
    "InputTooLarge",
    "ParseFailure",
    "SnapshotToolError",
]
