"""Substitution plans mapping old name variants onto new ones."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator

from .errors import ConfigurationError
from .naming import DEFAULT_STYLES, CaseStyle, CaseStyleTable, derive_variants, is_decomposable

__all__ = ["SubstitutionPlan", "SubstitutionRule", "build_plan"]


LOGGER = logging.getLogger(__name__)

_FORBIDDEN_IN_REPLACEMENT = ("/", "\\", "\x00")


@dataclass(frozen=True, slots=True)
class SubstitutionRule:
    """Replace the literal ``pattern`` with ``replacement``."""

    pattern: str
    replacement: str
    style: CaseStyle

    def __str__(self) -> str:
        return f"{self.pattern} -> {self.replacement} ({self.style.value})"


@dataclass(frozen=True)
class SubstitutionPlan:
    """Ordered substitution rules applied in a single left-to-right scan.

    All patterns are compiled into one alternation, in rule order. At every
    position the regular expression engine tries the alternatives in that order
    and the first one that matches claims the region, so a shorter pattern can
    never rewrite text already consumed by a longer one and no replacement is
    ever rescanned.
    """

    rules: tuple[SubstitutionRule, ...] = ()
    degraded: bool = False
    _text: re.Pattern[str] | None = field(default=None, init=False, repr=False, compare=False)
    _bytes: re.Pattern[bytes] | None = field(default=None, init=False, repr=False, compare=False)
    _lookup: dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        patterns = [rule.pattern for rule in self.rules]
        if len(set(patterns)) != len(patterns):
            raise ValueError("substitution patterns must be unique")
        if any(not pattern for pattern in patterns):
            raise ValueError("substitution patterns must not be empty")
        if not self.rules:
            return

        alternation = "|".join(re.escape(pattern) for pattern in patterns)
        object.__setattr__(self, "_text", re.compile(alternation))
        object.__setattr__(
            self,
            "_bytes",
            re.compile(b"|".join(re.escape(pattern.encode("utf-8")) for pattern in patterns)),
        )
        object.__setattr__(self, "_lookup", {rule.pattern: rule.replacement for rule in self.rules})

    def __iter__(self) -> Iterator[SubstitutionRule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __bool__(self) -> bool:
        return bool(self.rules)

    def apply(self, text: str) -> str:
        """Return ``text`` with every claimed occurrence replaced."""

        if self._text is None:
            return text
        return self._text.sub(lambda match: self._lookup[match.group(0)], text)

    def apply_bytes(self, data: bytes) -> bytes:
        """Byte-level variant of :meth:`apply` for UTF-8 encoded content.

        UTF-8 is self-synchronising, so an encoded pattern can only match on
        character boundaries.
        """

        if self._bytes is None:
            return data
        return self._bytes.sub(
            lambda match: self._lookup[match.group(0).decode("utf-8")].encode("utf-8"),
            data,
        )

    def collisions(self) -> list[tuple[SubstitutionRule, SubstitutionRule]]:
        """Pairs whose replacement reintroduces another rule's pattern.

        A plan without collisions is idempotent: applying it twice gives the
        same result as applying it once.
        """

        found = []
        for produced in self.rules:
            for target in self.rules:
                if target.pattern in produced.replacement:
                    found.append((produced, target))
        return found


def _validate_replacement(value: str, style: CaseStyle) -> None:
    for forbidden in _FORBIDDEN_IN_REPLACEMENT:
        if forbidden in value:
            msg = f"new name form {value!r} ({style.value}) contains {forbidden!r}"
            raise ConfigurationError(msg)


def build_plan(
    old_name: str,
    new_name: str,
    styles: CaseStyleTable = DEFAULT_STYLES,
) -> SubstitutionPlan:
    """Build the ordered plan replacing ``old_name`` with ``new_name``.

    Both names are rendered in every style of ``styles`` and paired style by
    style. Pairs that would not change anything are dropped, and when several
    styles produce the same old form the highest priority style keeps it.
    Rules are sorted longest pattern first, then by style priority.

    When either name cannot be split into alphanumeric words without loss
    (``c++-tools`` for instance) the style forms would silently mangle it, so
    the plan degrades to the raw form only.
    """

    old_variants = derive_variants(old_name, styles)
    new_variants = derive_variants(new_name, styles)

    degraded = not (is_decomposable(old_name) and is_decomposable(new_name))
    if degraded:
        LOGGER.warning(
            "cannot map %r onto %r style by style; only the literal name will be replaced",
            old_name.strip(),
            new_name.strip(),
        )
        candidates = [CaseStyle.RAW]
    else:
        candidates = [style for style in styles.styles if style in old_variants]

    # A pattern belongs to the first style producing it, even when that style
    # maps it onto itself.
    claimed: dict[str, CaseStyle] = {}
    chosen: list[SubstitutionRule] = []
    for style in candidates:
        pattern = old_variants[style]
        replacement = new_variants[style]
        if not pattern:
            continue
        if pattern in claimed:
            LOGGER.debug("%s form %r already claimed by %s", style.value, pattern, claimed[pattern].value)
            continue
        claimed[pattern] = style
        if pattern == replacement:
            continue
        _validate_replacement(replacement, style)
        chosen.append(SubstitutionRule(pattern, replacement, style))

    ordered = sorted(
        chosen,
        key=lambda rule: (-len(rule.pattern), styles.priority(rule.style)),
    )
    plan = SubstitutionPlan(tuple(ordered), degraded=degraded)
    for rule in plan:
        LOGGER.debug("rule %s", rule)
    return plan
