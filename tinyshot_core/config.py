#!/usr/bin/env python3
from dataclasses import dataclass
import os
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Config:
    """Application configuration"""
    # Default compression budget
    max_text: int = int(os.getenv("TINYSHOT_MAX_TEXT", "1000"))
    max_elems: int = int(os.getenv("TINYSHOT_MAX_ELEMS", "15"))

    # Hard input ceiling (characters)
    max_html_chars: int = int(os.getenv("TINYSHOT_MAX_HTML_CHARS", "5000000"))

    # Structured pass returns at most this many elements before the caller's limit
    dom_pass_limit: int = int(os.getenv("TINYSHOT_DOM_PASS_LIMIT", "50"))

    # Document / selector caches
    cache_enabled: bool = os.getenv("TINYSHOT_CACHE_ENABLED", "true").lower() in ["true", "1", "yes"]
    cache_ttl: float = float(os.getenv("TINYSHOT_CACHE_TTL", "300"))
    cache_max_size: int = int(os.getenv("TINYSHOT_CACHE_MAX_SIZE", "100"))
    fingerprint_chars: int = int(os.getenv("TINYSHOT_FINGERPRINT_CHARS", "1000"))

    # Snapshot tool adapter gives the model more room than library callers
    tool_max_text: int = int(os.getenv("TINYSHOT_TOOL_MAX_TEXT", "3000"))
    tool_max_elems: int = int(os.getenv("TINYSHOT_TOOL_MAX_ELEMS", "50"))

    enable_debug: bool = os.getenv("TINYSHOT_DEBUG", "false").lower() == "true"

config = Config()
