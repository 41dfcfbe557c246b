"""
Element filters - meaningfulness, visibility and wrapper unwrapping

Static HTML has no layout, so visibility is inferred from markup only:
the ``hidden`` attribute, inline display/visibility styles and common
"hide me" utility classes, on the element or any ancestor below <body>.

Candidates of one document are checked through a single ElementFilter,
which memoizes per-tag results so nested markup is walked once in total
rather than once per candidate.
"""

import re
from typing import Dict, FrozenSet, List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import CData, NavigableString, PreformattedString, Tag

MAX_LABEL_TEXT = 100
MAX_UNWRAP_DEPTH = 5

HIDDEN_CLASS_PATTERNS = ('hidden', 'invisible', 'd-none', 'sr-only', 'visually-hidden')
MEANINGFUL_ATTR_PREFIXES = ('id', 'data-', 'aria-', 'role', 'onclick', 'onchange')
WRAPPER_TAGS = ('div', 'span')

# String types get_text() reads by default
_TEXT_TYPES = frozenset((NavigableString, CData))

_WS = re.compile(r'\s+')

# (length, first non-space offset, last non-space offset)
Span = Tuple[int, Optional[int], Optional[int]]


def class_string(element: Tag) -> str:
    """Class attribute as a single space-separated string."""
    classes = element.get('class') or []
    if isinstance(classes, str):
        return classes
    return ' '.join(classes)


def child_elements(element: Tag) -> List[Tag]:
    return [child for child in element.children if isinstance(child, Tag)]


def _is_top(node) -> bool:
    return node is None or isinstance(node, BeautifulSoup) or node.name in ('body', 'html')


def _hidden_by_markup(element: Tag) -> bool:
    if element.has_attr('hidden'):
        return True

    style = _WS.sub('', (element.get('style') or '').lower())
    if 'display:none' in style or 'visibility:hidden' in style:
        return True

    classes = class_string(element)
    return any(pattern in classes for pattern in HIDDEN_CLASS_PATTERNS)


def _string_span(text: str) -> Span:
    stripped = text.lstrip()
    if not stripped:
        return len(text), None, None
    return len(text), len(text) - len(stripped), len(text.rstrip()) - 1


class ElementFilter:
    """
    Memoized visibility, ancestor and label-length checks for one document.

    Results are keyed by ``id()`` of the tags, so an instance must not
    outlive the document it was used on.
    """

    def __init__(self):
        self._visible: Dict[int, bool] = {}
        self._within: Dict[str, Dict[int, bool]] = {}
        self._spans: Dict[FrozenSet[type], Dict[int, Span]] = {}

    def text_length(self, element: Tag) -> int:
        """``len(element.get_text().strip())`` without building the string."""
        types = frozenset(element.interesting_string_types or _TEXT_TYPES)
        spans = self._spans.setdefault(types, {})

        # Post-order walk; subtrees already measured are reused
        stack = [element]
        while stack:
            node = stack[-1]
            if id(node) in spans:
                stack.pop()
                continue
            pending = [c for c in node.children if isinstance(c, Tag) and id(c) not in spans]
            if pending:
                stack.extend(pending)
                continue
            stack.pop()
            spans[id(node)] = self._combine(node, types, spans)

        _, first, last = spans[id(element)]
        if first is None:
            return 0
        return last - first + 1

    @staticmethod
    def _combine(node: Tag, types: FrozenSet[type], spans: Dict[int, Span]) -> Span:
        length = 0
        first = last = None
        for child in node.children:
            if isinstance(child, Tag):
                size, lo, hi = spans[id(child)]
            elif type(child) in types:
                size, lo, hi = _string_span(child)
            else:
                continue
            if lo is not None:
                if first is None:
                    first = length + lo
                last = length + hi
            length += size
        return length, first, last

    def is_meaningful(self, element: Tag) -> bool:
        length = self.text_length(element)
        if not length and element.name != 'input':
            return False
        return length <= MAX_LABEL_TEXT

    def is_visible(self, element: Tag) -> bool:
        chain = []
        node = element
        result = True
        while True:
            cached = self._visible.get(id(node))
            if cached is not None:
                result = cached
                break
            chain.append(node)
            if _hidden_by_markup(node):
                result = False
                break
            parent = node.parent
            if _is_top(parent):
                break
            node = parent

        # Every node walked shares the outcome of the topmost one checked
        for node in chain:
            self._visible[id(node)] = result
        return result

    def within(self, element: Tag, selector: str) -> bool:
        """Some ancestor of ``element`` matches the CSS ``selector``."""
        memo = self._within.setdefault(selector, {})
        chain = []
        node = element.parent
        result = False
        while node is not None and not isinstance(node, BeautifulSoup):
            cached = memo.get(id(node))
            if cached is not None:
                result = cached
                break
            chain.append(node)
            if node.css.match(selector):
                result = True
                break
            node = node.parent

        for node in chain:
            memo[id(node)] = result
        return result


def is_meaningful_element(element: Tag) -> bool:
    """
    Element carries a usable label.

    Inputs may be empty; anything else needs text, and text over
    100 characters is treated as a content block rather than a control.
    """
    return ElementFilter().is_meaningful(element)


def is_visible(element: Tag) -> bool:
    """Element and every ancestor below <body> are visible."""
    return ElementFilter().is_visible(element)


def own_text(element: Tag) -> str:
    """Direct text children only (comments and other markup strings excluded)."""
    return ''.join(
        str(child) for child in element.children
        if isinstance(child, NavigableString) and not isinstance(child, PreformattedString)
    )


def has_meaningful_attributes(element: Tag) -> bool:
    for attr in element.attrs:
        if attr in ('class', 'style'):
            continue
        if attr.startswith(MEANINGFUL_ATTR_PREFIXES):
            return True
    return False


def is_useless_wrapper(element: Tag) -> bool:
    """Content-free div/span with exactly one child element and no semantic attributes."""
    if element.name not in WRAPPER_TAGS:
        return False
    if own_text(element).strip():
        return False
    if len(child_elements(element)) != 1:
        return False
    if has_meaningful_attributes(element):
        return False
    return True


def unwrap_useless_wrappers(elements: List[Tag]) -> List[Tag]:
    """
    Replace wrappers with their single child (at most 5 levels) and
    drop repeats. Repeats are detected by identity: bs4 compares tags
    structurally, so two identical buttons are still two entries.

    Idempotent for wrapper chains up to 5 levels deep. A longer chain
    stops at its 6th level, so a second pass descends another 5.
    """
    unwrapped: List[Tag] = []
    seen = set()

    for element in elements:
        depth = 0
        while depth < MAX_UNWRAP_DEPTH and is_useless_wrapper(element):
            element = child_elements(element)[0]
            depth += 1

        if id(element) not in seen:
            seen.add(id(element))
            unwrapped.append(element)

    return unwrapped
