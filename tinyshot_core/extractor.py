"""
Tinyshot - Compress raw page HTML into a compact snapshot for LLM prompts.

A captured page (often hundreds of KB) becomes a title, a short visible
text excerpt and a bounded list of interactive elements with selectors.

Element extraction is a two-strategy chain:
1. DomStrategy   - parse with BeautifulSoup, filter, unwrap, synthesize selectors
2. RegexStrategy - forward scan of raw markup, used only when (1) finds nothing

Outputs of the two strategies are never mixed.

Usage:
    from tinyshot_core import Tinyshot, CompressionOptions

    tinyshot = Tinyshot()
    snapshot = tinyshot.compress(html, CompressionOptions(max_text_length=500))
    prompt_payload = snapshot.to_json()
"""

import logging
import re
import string
from typing import Any, Iterator, List, Mapping, Optional, Tuple, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from .cache import SnapshotCache
from .config import Config, config as default_config
from .exceptions import InputTooLarge, ParseFailure
from .restorer import restore as restore_snapshot
from .selectors import SelectorSynthesizer
from .snapshot_types import (
    LABEL_MAX_CHARS,
    CompactSnapshot,
    CompressionOptions,
    ElementKind,
    InteractiveElement,
)
from .visibility import ElementFilter, unwrap_useless_wrappers

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Page"

# Scan order defines the order of elements in the snapshot.
# (ancestor, target) pairs match like the descendant selector "ancestor target".
CANDIDATE_SELECTORS = [
    'button',
    'a[href]',
    'input[type]:not([type="hidden"])',
    'select',
    'textarea',
    '[role="button"]',
    '[role="link"]',
    '[role="menuitem"]',
    '[onclick]',
    ('nav', 'a'),
    ('.menu', 'a'),
    '.nav-link',
]

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_WS = re.compile(r'\s+')
_PLACEHOLDER = re.compile(r'placeholder=["\']([^"\']*)')

OptionsLike = Union[CompressionOptions, Mapping[str, Any], None]


class _Cursor:
    """``str.find`` for one token, queried with non-decreasing start positions."""

    def __init__(self, text: str, token: str):
        self.text = text
        self.token = token
        self.found: Optional[int] = None

    def find(self, start: int) -> int:
        if self.found is None or 0 <= self.found < start:
            self.found = self.text.find(self.token, start)
        return self.found


def _blocks(html: str, name: str, single_line: bool = False) -> Iterator[Tuple[int, int, int, int]]:
    """
    Yield ``(start, inner_start, inner_end, end)`` for each ``<name...>...</name>``
    block, left to right and non-overlapping, matched case-insensitively.

    An opener runs to the first ``>`` after it and the block closes at the
    first ``</name>`` after that; with ``single_line`` the inner part may not
    contain a newline. Every position is searched forward once, so the scan
    is linear even when openers are unclosed or repeated.
    """
    lowered = html.translate(_ASCII_LOWER)
    opener, closer = f'<{name}', f'</{name}>'
    tag_ends = _Cursor(lowered, '>')
    closers = _Cursor(lowered, closer)
    newlines = _Cursor(lowered, '\n')

    pos = 0
    while True:
        start = lowered.find(opener, pos)
        if start < 0:
            return
        tag_end = tag_ends.find(start + len(opener))
        if tag_end < 0:
            return
        inner_start = tag_end + 1
        inner_end = closers.find(inner_start)
        if inner_end < 0:
            return
        if single_line:
            newline = newlines.find(inner_start)
            if 0 <= newline < inner_end:
                pos = start + 1
                continue
        end = inner_end + len(closer)
        yield start, inner_start, inner_end, end
        pos = end


def _open_tags(html: str, name: str) -> Iterator[str]:
    """Each ``<name...>`` opening tag, up to and including its first ``>``."""
    lowered = html.translate(_ASCII_LOWER)
    opener = f'<{name}'
    pos = 0
    while True:
        start = lowered.find(opener, pos)
        if start < 0:
            return
        end = lowered.find('>', start + len(opener))
        if end < 0:
            return
        yield html[start:end + 1]
        pos = end + 1


def _strip_blocks(html: str, name: str) -> str:
    parts = []
    pos = 0
    for start, _, _, end in _blocks(html, name):
        parts.append(html[pos:start])
        pos = end
    parts.append(html[pos:])
    return ''.join(parts)


def strip_tags(html: str, replacement: str = ' ') -> str:
    """Replace every ``<...>`` (at least one character inside) with ``replacement``."""
    parts = []
    pos = 0
    start = html.find('<')
    while start >= 0:
        end = html.find('>', start + 1)
        if end < 0:
            break
        if end == start + 1:
            start = html.find('<', end)
            continue
        parts.append(html[pos:start])
        parts.append(replacement)
        pos = end + 1
        start = html.find('<', pos)
    parts.append(html[pos:])
    return ''.join(parts)


def extract_title(html: str) -> str:
    """First single-line <title> content, or "Page"."""
    for _, inner_start, inner_end, _ in _blocks(html, 'title', single_line=True):
        return html[inner_start:inner_end].strip() or DEFAULT_TITLE
    return DEFAULT_TITLE


def extract_text(html: str) -> str:
    """Visible text: scripts/styles removed, tags stripped, whitespace collapsed."""
    text = _strip_blocks(html, 'script')
    text = _strip_blocks(text, 'style')
    text = strip_tags(text)
    return _WS.sub(' ', text).strip()


class DomStrategy:
    """Structured extraction over a parsed document."""

    name = "dom"

    def __init__(
        self,
        synthesizer: SelectorSynthesizer,
        cache: Optional[SnapshotCache] = None,
        limit: int = 50,
    ):
        self.synthesizer = synthesizer
        self.cache = cache
        self.limit = limit

    def parse(self, html: str) -> BeautifulSoup:
        if self.cache is not None:
            document = self.cache.get_document(html)
            if document is not None:
                return document
        try:
            document = BeautifulSoup(html, 'html.parser')
        except Exception as e:
            raise ParseFailure(str(e)) from e
        if self.cache is not None:
            self.cache.put_document(html, document)
        return document

    def extract(self, html: str, options: CompressionOptions) -> List[InteractiveElement]:
        document = self.parse(html)
        try:
            elements = self.find_meaningful_elements(document)
            return [self.to_element(el, options) for el in elements[:self.limit]]
        except Exception as e:
            raise ParseFailure(str(e)) from e

    def find_meaningful_elements(self, document: BeautifulSoup) -> List[Tag]:
        """Candidates that carry a label and are not hidden, wrappers collapsed."""
        element_filter = ElementFilter()
        meaningful: List[Tag] = []
        for selector in CANDIDATE_SELECTORS:
            if isinstance(selector, tuple):
                ancestor, target = selector
                matches = [
                    el for el in document.select(target)
                    if element_filter.within(el, ancestor)
                ]
            else:
                matches = document.select(selector)
            for element in matches:
                if element_filter.is_meaningful(element) and element_filter.is_visible(element):
                    meaningful.append(element)
        return unwrap_useless_wrappers(meaningful)

    def to_element(self, element: Tag, options: CompressionOptions) -> InteractiveElement:
        tag = element.name.lower()
        text = element.get_text().strip()
        selector = self.synthesizer.selector_for(element)
        context = self.synthesizer.context_for(element)
        xpath = self.synthesizer.xpath_for(element) if options.include_xpath else None

        if tag == 'button':
            label, fallback = text, 'page button'
        elif tag == 'a':
            label, fallback = text, 'page link'
        elif tag == 'input':
            label = element.get('placeholder') or element.get('name') or 'Input'
            fallback = f"{element.get('type') or 'text'} input"
        elif tag == 'select':
            label, fallback = text[:LABEL_MAX_CHARS] or 'Select', 'dropdown select'
        elif tag == 'textarea':
            label, fallback = element.get('placeholder') or 'Text area', 'text area'
        else:
            label, fallback = text, f"{tag} element"

        return InteractiveElement(
            kind=ElementKind.from_tag(tag),
            label=label[:LABEL_MAX_CHARS],
            selector=selector,
            context=context or fallback,
            xpath=xpath,
        )


class RegexStrategy:
    """Best-effort scan of raw markup; selectors are bare tag names."""

    name = "regex"

    def extract(self, html: str, options: CompressionOptions) -> List[InteractiveElement]:
        elements: List[InteractiveElement] = []

        for start, _, _, end in _blocks(html, 'button', single_line=True):
            text = strip_tags(html[start:end], '').strip()
            if text:
                elements.append(InteractiveElement(ElementKind.BUTTON, text[:LABEL_MAX_CHARS], 'button'))

        for start, _, _, end in _blocks(html, 'a', single_line=True):
            text = strip_tags(html[start:end], '').strip()
            if text:
                elements.append(InteractiveElement(ElementKind.LINK, text[:LABEL_MAX_CHARS], 'a'))

        for tag in _open_tags(html, 'input'):
            placeholder = _PLACEHOLDER.search(tag)
            label = (placeholder.group(1) if placeholder else '') or 'Input'
            elements.append(InteractiveElement(ElementKind.INPUT, label[:LABEL_MAX_CHARS], 'input'))

        return elements


class Tinyshot:
    """
    HTML compressor.

    Owns its cache and strategies; pass ``cache=SnapshotCache(enabled=False)``
    to run uncached, or share one cache between instances explicitly.
    """

    def __init__(self, cache: Optional[SnapshotCache] = None, config: Optional[Config] = None):
        self.config = config or default_config
        if cache is None:
            cache = SnapshotCache(
                ttl=self.config.cache_ttl,
                max_size=self.config.cache_max_size,
                fingerprint_chars=self.config.fingerprint_chars,
                enabled=self.config.cache_enabled,
            )
        self.cache = cache
        self.synthesizer = SelectorSynthesizer(cache)
        self.strategies = [
            DomStrategy(self.synthesizer, cache, limit=self.config.dom_pass_limit),
            RegexStrategy(),
        ]

    @property
    def default_options(self) -> CompressionOptions:
        return CompressionOptions(
            max_text_length=self.config.max_text,
            max_element_count=self.config.max_elems,
        )

    def resolve_options(self, options: OptionsLike) -> CompressionOptions:
        if isinstance(options, CompressionOptions):
            return options
        return CompressionOptions.from_mapping(options, defaults=self.default_options)

    def compress(self, html: str, options: OptionsLike = None) -> CompactSnapshot:
        """
        Compress HTML into a CompactSnapshot.

        Args:
            html: Raw page HTML
            options: CompressionOptions or a dict (``maxText``/``maxElems`` accepted)

        Returns:
            Snapshot with ``len(text) <= max_text_length`` and
            ``len(elements) <= max_element_count``

        Raises:
            InputTooLarge: HTML longer than ``config.max_html_chars``
        """
        self.cache.maybe_sweep()

        if len(html) > self.config.max_html_chars:
            raise InputTooLarge(len(html), self.config.max_html_chars)

        opts = self.resolve_options(options)

        title = extract_title(html)
        text = extract_text(html)[:opts.max_text_length]
        elements = self.extract_elements(html, opts)[:opts.max_element_count]

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Compressed {len(html)} chars → title={title!r}, "
                f"{len(text)} text chars, {len(elements)} elements"
            )
        return CompactSnapshot(title=title, text=text, elements=tuple(elements))

    def extract_elements(self, html: str, options: CompressionOptions) -> List[InteractiveElement]:
        for strategy in self.strategies:
            try:
                elements = strategy.extract(html, options)
            except ParseFailure as e:
                logger.warning(f"DOM parsing failed: {e}")
                continue
            if elements:
                return elements
            logger.debug(f"{strategy.name} strategy found no elements")
        return []

    @staticmethod
    def restore(snapshot: Union[CompactSnapshot, Mapping[str, Any]]) -> str:
        return restore_snapshot(snapshot)


_default_tinyshot: Optional[Tinyshot] = None


def get_default_tinyshot() -> Tinyshot:
    """Get or create the process-wide Tinyshot instance."""
    global _default_tinyshot
    if _default_tinyshot is None:
        _default_tinyshot = Tinyshot()
    return _default_tinyshot


def reset_default_tinyshot() -> None:
    """Drop the process-wide instance (and its cache)."""
    global _default_tinyshot
    if _default_tinyshot is not None:
        _default_tinyshot.cache.clear()
    _default_tinyshot = None


def compress(html: str, options: OptionsLike = None) -> CompactSnapshot:
    return get_default_tinyshot().compress(html, options)


def restore(snapshot: Union[CompactSnapshot, Mapping[str, Any]]) -> str:
    return restore_snapshot(snapshot)
