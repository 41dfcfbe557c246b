"""
Snapshot Types - Data structures for compressed page snapshots

Contains:
- ElementKind enum - closed set of interactive element kinds
- InteractiveElement - one control the model can act on
- CompactSnapshot - title, visible text excerpt and element list
- CompressionOptions - text/element budget for a compress call

The wire shape (what gets JSON-encoded into prompts) is:

    {"title": str, "text": str,
     "elems": [{"type": "btn"|"input"|"link"|"select", "text": str,
                "sel": str, "context"?: str, "xpath"?: str}]}
"""

import json
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple


LABEL_MAX_CHARS = 30


class ElementKind(Enum):
    """Kind of interactive element"""
    BUTTON = "btn"
    INPUT = "input"
    LINK = "link"
    SELECT = "select"

    @classmethod
    def from_tag(cls, tag: str) -> "ElementKind":
        """Map an HTML tag name to a kind; unknown tags are treated as buttons."""
        return _TAG_KINDS.get((tag or "").lower(), cls.BUTTON)

    @classmethod
    def from_wire(cls, value: Any) -> "ElementKind":
        try:
            return cls(value)
        except ValueError:
            return cls.BUTTON


_TAG_KINDS = {
    "button": ElementKind.BUTTON,
    "a": ElementKind.LINK,
    "input": ElementKind.INPUT,
    "textarea": ElementKind.INPUT,
    "select": ElementKind.SELECT,
}


@dataclass(frozen=True)
class InteractiveElement:
    """Interactive element entry of a snapshot"""
    kind: ElementKind
    label: str
    selector: str
    context: Optional[str] = None
    xpath: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {"type": self.kind.value, "text": self.label, "sel": self.selector}
        if self.context:
            data["context"] = self.context
        if self.xpath:
            data["xpath"] = self.xpath
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InteractiveElement":
        return cls(
            kind=ElementKind.from_wire(data.get("type")),
            label=str(data.get("text") or ""),
            selector=str(data.get("sel") or ""),
            context=data.get("context") or None,
            xpath=data.get("xpath") or None,
        )


@dataclass(frozen=True)
class CompactSnapshot:
    """Compressed page snapshot"""
    title: str
    text: str
    elements: Tuple[InteractiveElement, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "text": self.text,
            "elems": [elem.to_dict() for elem in self.elements],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompactSnapshot":
        elems: Iterable[Mapping[str, Any]] = data.get("elems") or []
        return cls(
            title=str(data.get("title") or "Page"),
            text=str(data.get("text") or ""),
            elements=tuple(InteractiveElement.from_dict(e) for e in elems),
        )

    @classmethod
    def from_json(cls, payload: str) -> "CompactSnapshot":
        return cls.from_dict(json.loads(payload))


# Wire / legacy option names accepted by CompressionOptions.from_mapping
_OPTION_ALIASES = {
    "maxText": "max_text_length",
    "maxTextLength": "max_text_length",
    "max_text": "max_text_length",
    "maxElems": "max_element_count",
    "maxElementCount": "max_element_count",
    "max_elems": "max_element_count",
    "includeXpath": "include_xpath",
}


@dataclass(frozen=True)
class CompressionOptions:
    """Budget for a single compress call"""
    max_text_length: int = 1000
    max_element_count: int = 15
    include_xpath: bool = False

    def __post_init__(self):
        for name in ("max_text_length", "max_element_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_mapping(
        cls,
        data: Optional[Mapping[str, Any]],
        defaults: Optional["CompressionOptions"] = None,
    ) -> "CompressionOptions":
        """Build options from a dict, filling missing keys from ``defaults``."""
        base = defaults or cls()
        values = {
            "max_text_length": base.max_text_length,
            "max_element_count": base.max_element_count,
            "include_xpath": base.include_xpath,
        }
        for key, value in (data or {}).items():
            name = _OPTION_ALIASES.get(key, key)
            if name in values and value is not None:
                values[name] = value
        return cls(**values)


__all__ = [
    'LABEL_MAX_CHARS',
    'ElementKind',
    'InteractiveElement',
    'CompactSnapshot',
    'CompressionOptions',
]
