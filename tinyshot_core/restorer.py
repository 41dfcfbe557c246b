"""
Snapshot Restorer - Rebuild a semantic HTML skeleton from a CompactSnapshot

Lossy by nature: the output is a readable page outline carrying the
original labels and selectors (as ``sel="..."`` attributes), not the
page that was compressed.
"""

import re
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Union

from .snapshot_types import CompactSnapshot, ElementKind, InteractiveElement

DEFAULT_CONTEXT = "main"
NAV_CONTEXTS = ("nav", "nav > menu")
HEADER_CONTEXTS = ("header",)
FORM_CONTEXTS = ("form", "form > login", "login form", "search form")

_PARAGRAPH_BREAK = re.compile(r'\n\s*\n')


def escape_html(text: str) -> str:
    return (
        (text or "")
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )


def group_by_context(elements) -> Dict[str, List[InteractiveElement]]:
    """Group elements by context, first-seen order; missing context goes to "main"."""
    groups: Dict[str, List[InteractiveElement]] = OrderedDict()
    for elem in elements:
        groups.setdefault(elem.context or DEFAULT_CONTEXT, []).append(elem)
    return groups


def element_to_html(elem: InteractiveElement, indent: str = "") -> str:
    sel = escape_html(elem.selector)
    text = escape_html(elem.label)
    if elem.kind is ElementKind.BUTTON:
        return f'{indent}<button sel="{sel}">{text}</button>'
    if elem.kind is ElementKind.LINK:
        return f'{indent}<a href="#" sel="{sel}">{text}</a>'
    if elem.kind is ElementKind.INPUT:
        return f'{indent}<input type="text" sel="{sel}" placeholder="{text}">'
    if elem.kind is ElementKind.SELECT:
        return f'{indent}<select sel="{sel}"><option>{text}</option></select>'
    return f'{indent}<div sel="{sel}">{text}</div>'


def _nav_section(elements: List[InteractiveElement]) -> str:
    items = "\n".join(element_to_html(e, "      ") for e in elements)
    return f"  <header>\n    <nav>\n{items}\n    </nav>\n  </header>"


def _header_section(elements: List[InteractiveElement]) -> str:
    items = "\n".join(element_to_html(e, "    ") for e in elements)
    return f"  <header>\n{items}\n  </header>"


def _form_section(elements: List[InteractiveElement]) -> str:
    items = "\n".join(element_to_html(e, "      ") for e in elements)
    return f"    <form>\n{items}\n    </form>"


def _content_section(page_text: str, elements: List[InteractiveElement]) -> str:
    lines: List[str] = []

    for paragraph in _PARAGRAPH_BREAK.split(page_text or ""):
        if paragraph.strip():
            lines.append(f"      <p>{escape_html(paragraph.strip())}</p>")

    if elements:
        lines.append('      <div class="actions">')
        lines.extend(element_to_html(e, "        ") for e in elements)
        lines.append("      </div>")

    body = "\n".join(lines)
    return f"    <section>\n{body}\n    </section>"


def semantic_body(groups: Dict[str, List[InteractiveElement]], page_text: str) -> str:
    sections: List[str] = []

    nav_elems = [e for ctx in NAV_CONTEXTS for e in groups.get(ctx, [])]
    if nav_elems:
        sections.append(_nav_section(nav_elems))

    header_elems = [e for ctx in HEADER_CONTEXTS for e in groups.get(ctx, [])]
    if header_elems:
        sections.append(_header_section(header_elems))

    main_sections: List[str] = []

    form_elems = [e for ctx in FORM_CONTEXTS for e in groups.get(ctx, [])]
    if form_elems:
        main_sections.append(_form_section(form_elems))

    claimed = set(NAV_CONTEXTS) | set(HEADER_CONTEXTS) | set(FORM_CONTEXTS)
    general_elems = [e for ctx, elems in groups.items() if ctx not in claimed for e in elems]
    if (page_text or "").strip() or general_elems:
        main_sections.append(_content_section(page_text, general_elems))

    if main_sections:
        sections.append("  <main>\n" + "\n".join(main_sections) + "\n  </main>")

    return "\n".join(sections)


def restore(snapshot: Union[CompactSnapshot, Mapping[str, Any]]) -> str:
    """
    Render a snapshot as semantic HTML.

    Accepts a CompactSnapshot or its wire dict. Always returns a full
    document with doctype, <title> and <body>, however sparse the input.
    """
    if not isinstance(snapshot, CompactSnapshot):
        snapshot = CompactSnapshot.from_dict(snapshot)

    body = semantic_body(group_by_context(snapshot.elements), snapshot.text)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        f"  <title>{escape_html(snapshot.title)}</title>\n"
        "</head>\n"
        "<body>\n"
        f"{body}\n"
        "</body>\n"
        "</html>"
    )
