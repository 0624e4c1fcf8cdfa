"""Declarative field extraction over a rendered HTML document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from renderscrape.errors import InputError

logger = logging.getLogger(__name__)

ExtractedValue = Union[str, int, float]


@dataclass(frozen=True)
class Single:
    """Read the first element matching ``selector``."""

    selector: str


@dataclass(frozen=True)
class FirstOf:
    """Try ``selectors`` in order; the first one that matches decides."""

    selectors: Tuple[str, ...]


@dataclass(frozen=True)
class Advanced:
    """Read one specific facet of the first match.

    ``attribute`` returns that attribute's raw value, ``render_html`` returns
    the inner HTML, and with neither set the trimmed text is returned.
    """

    selector: str
    attribute: Optional[str] = None
    render_html: bool = False

    def __post_init__(self) -> None:
        if self.attribute is not None and self.render_html:
            raise ValueError("Advanced rule cannot read an attribute and inner HTML at the same time")

    @property
    def mode(self) -> str:
        if self.attribute is not None:
            return "attribute"
        if self.render_html:
            return "html"
        return "text"


FieldRule = Union[Single, FirstOf, Advanced]


class ExtractionPlan(Mapping[str, FieldRule]):
    """Ordered, read-only mapping of output field names to rules."""

    def __init__(self, rules: Iterable[Tuple[str, FieldRule]]) -> None:
        entries: Dict[str, FieldRule] = {}
        for name, rule in rules:
            if name in entries:
                raise ValueError(f"Duplicate field name '{name}' in extraction plan")
            entries[name] = rule
        self._rules = entries

    def __getitem__(self, name: str) -> FieldRule:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"ExtractionPlan({self._rules!r})"


def parse_document(html: str) -> BeautifulSoup:
    """Parse rendered page HTML into a queryable tree."""
    return BeautifulSoup(html, "html.parser")


def build_plan(raw: Mapping[str, Any]) -> ExtractionPlan:
    """Convert a request's ``selectors`` object into an :class:`ExtractionPlan`.

    Accepted values per field:

    * ``"css"`` becomes :class:`Single`
    * ``["css1", "css2"]`` becomes :class:`FirstOf`
    * ``{"selector": "css", "attribute": "href"}``, ``{"selector": "css", "html": true}``
      or ``{"selector": "css", "textOnly": true}`` becomes :class:`Advanced`.
      When both ``attribute`` and ``html`` are given the attribute wins.

    Raises:
        InputError: When a field's value has none of these shapes.
    """
    rules = []
    for name, definition in raw.items():
        rules.append((name, _build_rule(name, definition)))
    return ExtractionPlan(rules)


def _build_rule(name: str, definition: Any) -> FieldRule:
    if isinstance(definition, str):
        if not definition.strip():
            raise InputError(f"Selector for field '{name}' must be a non-empty string")
        return Single(definition.strip())

    if isinstance(definition, list):
        selectors = [item.strip() for item in definition if isinstance(item, str) and item.strip()]
        if not selectors or len(selectors) != len(definition):
            raise InputError(f"Selector list for field '{name}' must contain only non-empty strings")
        return FirstOf(tuple(selectors))

    if isinstance(definition, Mapping):
        selector = definition.get("selector")
        if not isinstance(selector, str) or not selector.strip():
            raise InputError(f"Field '{name}' requires a non-empty 'selector'")
        attribute = definition.get("attribute")
        if attribute is not None and (not isinstance(attribute, str) or not attribute.strip()):
            raise InputError(f"Field '{name}' has an invalid 'attribute'")
        if attribute:
            return Advanced(selector.strip(), attribute=attribute.strip())
        return Advanced(selector.strip(), render_html=bool(definition.get("html")))

    raise InputError(f"Unsupported selector definition for field '{name}'")


def select_first(document: Any, selector: str) -> Optional[Tag]:
    """Return the first element matching ``selector``; invalid selectors match nothing."""
    try:
        return document.select_one(selector)
    except SelectorSyntaxError as exc:
        logger.warning("Ignoring invalid selector %r: %s", selector, exc)
        return None


def element_text(element: Tag) -> str:
    """Trimmed text content of ``element``."""
    return element.get_text().strip()


def inner_html(element: Tag) -> str:
    """Markup inside ``element``, without its own tag."""
    return element.decode_contents()


def attribute_value(element: Tag, name: str) -> Optional[str]:
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def element_value(element: Tag) -> str:
    """Best readable value of ``element``: text, then inner HTML, then ``src``, then ``href``.

    Blank candidates fall through to the next one. When all of them are blank
    the (empty) trimmed text is returned, so a matched element always
    produces a value.
    """
    text = element_text(element)
    for candidate in (text, inner_html(element), attribute_value(element, "src"), attribute_value(element, "href")):
        if candidate and candidate.strip():
            return candidate
    return text


def _apply_rule(document: Any, rule: FieldRule) -> Optional[ExtractedValue]:
    if isinstance(rule, Single):
        element = select_first(document, rule.selector)
        return element_value(element) if element is not None else None

    if isinstance(rule, FirstOf):
        for selector in rule.selectors:
            element = select_first(document, selector)
            if element is not None:
                return element_value(element)
        return None

    element = select_first(document, rule.selector)
    if element is None:
        return None
    if rule.mode == "attribute":
        return attribute_value(element, rule.attribute or "")
    if rule.mode == "html":
        return inner_html(element)
    return element_text(element)


def extract(document: Any, plan: ExtractionPlan) -> Dict[str, ExtractedValue]:
    """Apply ``plan`` to ``document`` in plan order.

    Fields whose selectors match nothing are left out of the result; a
    partial result is not an error. A missing document yields ``{}``.
    """
    if document is None:
        return {}

    result: Dict[str, ExtractedValue] = {}
    for name, rule in plan.items():
        value = _apply_rule(document, rule)
        if value is not None:
            result[name] = value
    return result
