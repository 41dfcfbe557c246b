"""
Selector Synthesizer - Short, human-readable selectors for parsed elements

Strategies (first match wins):
1. Meaningful id          -> ``#login-button``
2. Tag + semantic classes -> ``button.btn.primary``
   (+ ``[type="..."]`` for inputs, + ancestor prefix such as ``form``)

Selectors are identification hints for an LLM-driven automation loop.
They are not checked for uniqueness against the document.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .cache import SnapshotCache

LANDMARK_TAGS = ('nav', 'form', 'header', 'footer', 'main', 'aside')
SECTION_CLASS_HINTS = ('menu', 'sidebar', 'content', 'login', 'search')

PARENT_CONTEXT_DEPTH = 3
ELEMENT_CONTEXT_DEPTH = 2
MAX_CLASSES = 2

MEANINGLESS_ID = re.compile(r'^(auto|gen|temp|[a-f0-9]{8,}|\d+)$', re.IGNORECASE)
MEANINGFUL_CLASS = re.compile(
    r'^(btn|button|link|nav|menu|form|input|search|login|header|footer|main|primary|'
    r'secondary|submit|cancel|close|back|next|prev|home|user|account|profile|settings|'
    r'logout|signin|signup)$',
    re.IGNORECASE,
)
MEANINGLESS_CLASS = re.compile(
    r'^(col-|row-|d-|m[tblr]?-|p[tblr]?-|text-|bg-|border-|[a-f0-9]{6,}|w-|h-|flex|grid|'
    r'absolute|relative|fixed|static)$',
    re.IGNORECASE,
)


def is_meaningful_id(value: Optional[str]) -> bool:
    """Id looks hand-written: not numeric/hex/auto-ish, 3..29 characters."""
    if not value:
        return False
    return not MEANINGLESS_ID.match(value) and 2 < len(value) < 30


def is_meaningful_class(value: str) -> bool:
    return bool(MEANINGFUL_CLASS.match(value)) and not MEANINGLESS_CLASS.match(value)


def _classes(element: Tag) -> List[str]:
    classes = element.get('class') or []
    if isinstance(classes, str):
        classes = classes.split()
    return [c for c in classes if c]


def _ancestors(element: Tag, depth: int):
    parent = element.parent
    level = 0
    while parent is not None and not isinstance(parent, BeautifulSoup) and level < depth:
        yield parent
        parent = parent.parent
        level += 1


class SelectorSynthesizer:
    """
    Build selectors and display context for elements.

    The element-local part of a selector is cached by
    (tag, id, classes, type); the ancestor prefix is always recomputed so
    identical buttons in different regions still get different selectors.
    """

    def __init__(self, cache: Optional[SnapshotCache] = None):
        self.cache = cache

    def selector_for(self, element: Tag) -> str:
        local = self._local_selector(element)
        if local.startswith('#'):
            return local

        prefix = self.parent_context(element)
        if prefix:
            return f"{prefix} {local}"
        return local

    def _local_selector(self, element: Tag) -> str:
        key = self.cache_key(element)
        if self.cache is not None:
            cached = self.cache.get_selector(key)
            if cached is not None:
                return cached

        tag = element.name.lower()
        element_id = element.get('id')
        if is_meaningful_id(element_id):
            local = f"#{element_id}"
        else:
            parts = [tag]
            meaningful = [c for c in _classes(element) if is_meaningful_class(c)]
            if meaningful:
                parts.append('.' + '.'.join(meaningful[:MAX_CLASSES]))
            if tag == 'input':
                input_type = element.get('type')
                if input_type:
                    parts.append(f'[type="{input_type}"]')
            local = ''.join(parts)

        if self.cache is not None:
            self.cache.put_selector(key, local)
        return local

    @staticmethod
    def cache_key(element: Tag):
        return (
            element.name.lower(),
            element.get('id') or '',
            tuple(_classes(element)),
            element.get('type') or '',
        )

    def parent_context(self, element: Tag) -> str:
        """Nearest landmark tag, meaningful id or meaningful class within 3 ancestors."""
        for parent in _ancestors(element, PARENT_CONTEXT_DEPTH):
            tag = parent.name.lower()
            if tag in LANDMARK_TAGS:
                return tag

            parent_id = parent.get('id')
            if is_meaningful_id(parent_id):
                return f"#{parent_id}"

            for cls in _classes(parent):
                if is_meaningful_class(cls):
                    return f".{cls}"
        return ''

    def context_for(self, element: Tag) -> str:
        """
        Region hint for display, e.g. ``nav`` or ``login form > form``.

        Looks at the two nearest ancestors, outermost first.
        """
        contexts: List[str] = []
        for parent in _ancestors(element, ELEMENT_CONTEXT_DEPTH):
            tag = parent.name.lower()
            if tag in LANDMARK_TAGS:
                contexts.insert(0, tag)

            section = next(
                (c for c in _classes(parent) if any(hint in c for hint in SECTION_CLASS_HINTS)),
                None,
            )
            if section:
                contexts.insert(0, re.sub(r'[-_]', ' ', section))

        return ' > '.join(contexts)

    @staticmethod
    def xpath_for(element: Tag) -> str:
        """Absolute positional XPath, e.g. ``/html/body/form/input[2]``."""
        components = []
        child = element
        for parent in child.parents:
            siblings = parent.find_all(child.name, recursive=False)
            if len(siblings) == 1:
                components.append(child.name)
            else:
                position = next(i for i, s in enumerate(siblings, 1) if s is child)
                components.append(f"{child.name}[{position}]")
            child = parent
            if isinstance(parent, BeautifulSoup):
                break
        components.reverse()
        return '/' + '/'.join(components)
