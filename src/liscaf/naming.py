"""Case-style analysis for project names.

A name such as ``acme-app`` is decomposed into lowercase words and re-rendered
in every naming convention liscaf knows about. The conventions live in an
immutable :class:`CaseStyleTable` that callers build once and pass around;
:data:`DEFAULT_STYLES` is the table used by the command line.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from .errors import ConfigurationError

__all__ = [
    "DEFAULT_STYLES",
    "CaseStyle",
    "CaseStyleTable",
    "StyleRule",
    "derive_variants",
    "is_decomposable",
    "slugify",
    "split_words",
]


_SEPARATORS = re.compile(r"[\s\-_]+")
_CASE_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class CaseStyle(str, Enum):
    """Naming conventions a base name may be written in."""

    KEBAB = "kebab"
    SNAKE = "snake"
    CONSTANT = "constant"
    PASCAL = "pascal"
    CAMEL = "camel"
    TITLE = "title"
    SPACED = "spaced"
    PASCAL_SNAKE = "pascal_snake"
    FLAT = "flat"
    FLAT_UPPER = "flat_upper"
    RAW = "raw"


def _lower(word: str) -> str:
    return word.lower()


def _upper(word: str) -> str:
    return word.upper()


def _capital(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


@dataclass(frozen=True, slots=True)
class StyleRule:
    """How one :class:`CaseStyle` joins and capitalises a word sequence."""

    style: CaseStyle
    joiner: str
    first: Callable[[str], str]
    rest: Callable[[str], str]

    def render(self, words: tuple[str, ...], raw: str) -> str:
        if self.style is CaseStyle.RAW:
            return raw
        if not words:
            return ""
        head, *tail = words
        return self.joiner.join([self.first(head), *(self.rest(word) for word in tail)])


@dataclass(frozen=True, slots=True)
class CaseStyleTable:
    """Ordered, immutable set of style rules.

    The order of :attr:`rules` is the priority used to break ties between
    substitution rules of equal length; the raw form must come last so it never
    masks a more specific style.
    """

    rules: tuple[StyleRule, ...]

    def __post_init__(self) -> None:
        seen: set[CaseStyle] = set()
        for rule in self.rules:
            if rule.style in seen:
                msg = f"duplicate rule for style {rule.style.value!r}"
                raise ValueError(msg)
            seen.add(rule.style)
        if CaseStyle.RAW in seen and self.rules[-1].style is not CaseStyle.RAW:
            msg = "the raw style must have the lowest priority"
            raise ValueError(msg)

    @property
    def styles(self) -> tuple[CaseStyle, ...]:
        return tuple(rule.style for rule in self.rules)

    def priority(self, style: CaseStyle) -> int:
        """Return the rank of ``style``; lower ranks win ties."""

        return self.styles.index(style)

    def render(self, words: tuple[str, ...], raw: str) -> dict[CaseStyle, str]:
        return {rule.style: rule.render(words, raw) for rule in self.rules}

    @classmethod
    def default(cls) -> "CaseStyleTable":
        return cls(
            rules=(
                StyleRule(CaseStyle.KEBAB, "-", _lower, _lower),
                StyleRule(CaseStyle.SNAKE, "_", _lower, _lower),
                StyleRule(CaseStyle.CONSTANT, "_", _upper, _upper),
                StyleRule(CaseStyle.PASCAL, "", _capital, _capital),
                StyleRule(CaseStyle.CAMEL, "", _lower, _capital),
                StyleRule(CaseStyle.TITLE, " ", _capital, _capital),
                StyleRule(CaseStyle.SPACED, " ", _lower, _lower),
                StyleRule(CaseStyle.PASCAL_SNAKE, "_", _capital, _capital),
                StyleRule(CaseStyle.FLAT, "", _lower, _lower),
                StyleRule(CaseStyle.FLAT_UPPER, "", _upper, _upper),
                StyleRule(CaseStyle.RAW, "", _lower, _lower),
            )
        )


DEFAULT_STYLES = CaseStyleTable.default()


def split_words(name: str) -> tuple[str, ...]:
    """Split ``name`` into lowercase words.

    Words are separated by ``-``, ``_``, whitespace, a lowercase letter or digit
    followed by an uppercase letter, and the end of an uppercase run that is
    followed by a capitalised word (``HTTPServer`` gives ``http`` and
    ``server``).
    """

    words: list[str] = []
    for part in _SEPARATORS.split(name):
        words.extend(piece.lower() for piece in _CASE_BOUNDARY.split(part) if piece)
    return tuple(words)


def is_decomposable(name: str) -> bool:
    """Whether ``name`` splits into words without losing any character."""

    words = split_words(name)
    return bool(words) and all(word.isalnum() for word in words)


def derive_variants(name: str, styles: CaseStyleTable = DEFAULT_STYLES) -> dict[CaseStyle, str]:
    """Render ``name`` in every style of ``styles``.

    The result preserves the table order. Single-word names still produce a
    value for every style, possibly the same string several times.
    """

    raw = name.strip()
    if not raw:
        raise ConfigurationError("name must not be empty")

    words = split_words(raw)
    if not words:
        raise ConfigurationError(f"name {name!r} contains no words")

    return styles.render(words, raw)


def slugify(value: str | Iterable[str], *, separator: str = "-") -> str:
    """Create a filesystem friendly ASCII slug from ``value``."""

    if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
        value = " ".join(str(part) for part in value)

    text = unicodedata.normalize("NFKD", str(value))
    text = text.encode("ascii", "ignore").decode("ascii")
    text = " ".join(split_words(text))
    text = re.sub(r"[^\w\- ]", "", text).strip()

    if not text:
        return ""

    collapsed = _SEPARATORS.sub(separator, text)
    return collapsed.strip(separator)

