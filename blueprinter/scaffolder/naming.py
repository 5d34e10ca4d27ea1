"""Name spellings and inflection.

Turns a raw entity name such as ``"foo/BarBaz"`` into every spelling the
templates need (``foo/bar-baz``, ``fooBarBaz``, ``FooBarBaz``,
``foo/bar_baz``) and provides the small singular/plural rule table used for
relationship attributes.  Everything here is a pure function.
"""

from __future__ import annotations

import re
from typing import Optional

from blueprinter.errors import InvalidNameError
from .models import Entity, Spellings


# ---------------------------------------------------------------------------
# Case conversion
# ---------------------------------------------------------------------------

_DECAMELIZE = re.compile(r"([a-z\d])([A-Z])")
_SEPARATORS = re.compile(r"[\s_\-.]+")


def dasherize(value: str) -> str:
    """Convert ``FooBar``, ``foo_bar`` or ``foo bar`` to ``foo-bar``.

    Slashes are preserved so path-bearing names keep their nesting.
    """
    return "/".join(_dasherize_segment(s) for s in value.split("/"))


def underscore(value: str) -> str:
    """Convert ``FooBar`` or ``foo-bar`` to ``foo_bar``, preserving slashes."""
    return "/".join(_dasherize_segment(s).replace("-", "_") for s in value.split("/"))


def camelize(value: str) -> str:
    """Convert ``foo-bar`` or ``foo/bar_baz`` to ``fooBar`` / ``fooBarBaz``."""
    words = [w for w in _SEPARATORS.split(dasherize(value).replace("/", "-")) if w]
    if not words:
        return ""
    return words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])


def classify(value: str) -> str:
    """Pascal-case spelling: ``foo/bar`` -> ``FooBar``."""
    camel = camelize(value)
    return camel[:1].upper() + camel[1:]


def _dasherize_segment(segment: str) -> str:
    s = _DECAMELIZE.sub(r"\1-\2", segment.strip())
    s = _SEPARATORS.sub("-", s.lower())
    return s.strip("-")


# ---------------------------------------------------------------------------
# Inflection
# ---------------------------------------------------------------------------

UNCOUNTABLE: frozenset[str] = frozenset({
    "equipment",
    "fish",
    "information",
    "jeans",
    "money",
    "news",
    "police",
    "rice",
    "series",
    "sheep",
    "species",
})

IRREGULAR: dict[str, str] = {
    "child": "children",
    "foot": "feet",
    "goose": "geese",
    "man": "men",
    "mouse": "mice",
    "ox": "oxen",
    "person": "people",
    "tooth": "teeth",
    "woman": "women",
}

# First match wins.
_PLURAL_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(p, re.IGNORECASE), r)
    for p, r in (
        (r"(quiz)$", r"\1zes"),
        (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
        (r"(bu|statu|alia)s$", r"\1ses"),
        (r"(x|ch|ss|sh)$", r"\1es"),
        (r"([^aeiouy]|qu)y$", r"\1ies"),
        (r"sis$", "ses"),
        (r"s$", "s"),
        (r"$", "s"),
    )
]

_SINGULAR_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(p, re.IGNORECASE), r)
    for p, r in (
        (r"(quiz)zes$", r"\1"),
        (r"(matr)ices$", r"\1ix"),
        (r"(vert|ind)ices$", r"\1ex"),
        (r"(bu|statu|alia)ses$", r"\1s"),
        (r"(bu|statu|alia)s$", r"\1s"),
        (r"(analy|ba|diagno|parenthe|progno|synop|the)ses$", r"\1sis"),
        (r"(x|ch|ss|sh)es$", r"\1"),
        (r"([^aeiouy]|qu)ies$", r"\1y"),
        (r"(ss)$", r"\1"),
        (r"s$", ""),
    )
]

_IRREGULAR_SINGULAR: dict[str, str] = {v: k for k, v in IRREGULAR.items()}


def pluralize(word: str) -> str:
    """Plural form of *word* (``bar`` -> ``bars``, ``echo`` -> ``echos``)."""
    return _inflect(word, IRREGULAR, _IRREGULAR_SINGULAR, _PLURAL_RULES)


def singularize(word: str) -> str:
    """Singular form of *word* (``bars`` -> ``bar``, ``categories`` -> ``category``)."""
    return _inflect(word, _IRREGULAR_SINGULAR, IRREGULAR, _SINGULAR_RULES)


def _inflect(
    word: str,
    irregular: dict[str, str],
    already: dict[str, str],
    rules: list[tuple[re.Pattern[str], str]],
) -> str:
    if not word:
        return word
    # Only the trailing word of a compound (``fooBar``, ``foo-bar``) inflects.
    match = re.search(r"([A-Z]?[a-z0-9]*)$", word)
    head, tail = word[: match.start()], word[match.start():]
    lower = tail.lower()
    if lower in UNCOUNTABLE or lower in already:
        return word
    if lower in irregular:
        replacement = irregular[lower]
        if tail[:1].isupper():
            replacement = replacement.capitalize()
        return head + replacement
    for pattern, repl in rules:
        if pattern.search(word):
            return pattern.sub(repl, word, count=1)
    return word


# ---------------------------------------------------------------------------
# NameResolver
# ---------------------------------------------------------------------------

def split_segments(raw_name: str) -> tuple[str, ...]:
    """Split *raw_name* on ``/``, dropping empty segments."""
    return tuple(s.strip() for s in raw_name.split("/") if s.strip())


class NameResolver:
    """Derives an ``Entity`` and its spellings from a raw name."""

    def resolve(self, raw_name: str) -> tuple[Spellings, tuple[str, ...]]:
        """Return ``(spellings, segments)`` for *raw_name*.

        Raises:
            InvalidNameError: If the name is empty or any segment has no
                usable characters (``foo/..``).
        """
        segments = split_segments(raw_name)
        if not segments or not all(_dasherize_segment(s) for s in segments):
            raise InvalidNameError(raw_name)
        joined = "/".join(segments)
        spellings = Spellings(
            dash=dasherize(joined),
            camel=camelize(joined),
            pascal=classify(joined),
            underscore=underscore(joined),
        )
        return spellings, segments

    def entity(
        self,
        raw_name: str,
        *,
        is_pod: bool = False,
        module_prefix: Optional[str] = None,
    ) -> Entity:
        spellings, segments = self.resolve(raw_name)
        return Entity(
            raw_name=raw_name,
            segments=segments,
            spellings=spellings,
            is_pod=is_pod,
            module_prefix=module_prefix,
        )
