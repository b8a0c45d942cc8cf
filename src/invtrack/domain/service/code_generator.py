"""Domain service: product code generation.

Product codes are short human-readable handles such as ``CP0001``. Two
numbering schemes are supported and one is picked when the repository
is built:

- ``CategoryCodePolicy`` numbers codes per category prefix
  (``Processor`` -> ``PR0001``, ``Storage`` -> ``ST0001``).
- ``SequentialCodePolicy`` ignores the category and keeps one global
  ``PR`` sequence.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable

from invtrack.domain.exceptions import ValidationError
from invtrack.domain.model.product import Product

SUFFIX_WIDTH = 4
_CODE_PATTERN = re.compile(r"^[A-Z]+(\d+)$")


def _format(prefix: str, number: int) -> str:
    return f"{prefix}{number:0{SUFFIX_WIDTH}d}"


def _suffix(code: str) -> int:
    match = _CODE_PATTERN.match(code)
    return int(match.group(1)) if match else 0


class CodePolicy(ABC):

    name: str

    @abstractmethod
    def prefix_for(self, category: str) -> str:
        """Return the letter prefix used for a product in *category*."""

    @abstractmethod
    def start_number(self, codes: set[str], prefix: str) -> int:
        """Return the first sequence number to try."""

    def next_code(self, existing: Iterable[Product], category: str) -> str:
        """Return a code for a new product that no live product uses."""
        codes = {p.code for p in existing}
        prefix = self.prefix_for(category)
        number = self.start_number(codes, prefix)
        candidate = _format(prefix, number)
        # Step forward in case a caller stored a code out of sequence.
        while candidate in codes:
            number += 1
            candidate = _format(prefix, number)
        return candidate


class CategoryCodePolicy(CodePolicy):
    """Per-category numbering: first two letters of the category, uppercased.

    Only ASCII letters count, so accented letters are skipped rather than
    transliterated; the prefix comes from the next ASCII letters instead. Short
    prefixes are padded with ``filler``.
    """

    name = "category"
    filler = "X"

    def prefix_for(self, category: str) -> str:
        letters = [c for c in (category or "").upper() if c.isalpha() and c.isascii()]
        return "".join(letters[:2]).ljust(2, self.filler)

    def start_number(self, codes: set[str], prefix: str) -> int:
        suffixes = [
            _suffix(code)
            for code in codes
            if code.startswith(prefix) and code[len(prefix):].isdigit()
        ]
        return max(suffixes, default=0) + 1


class SequentialCodePolicy(CodePolicy):
    """Flat numbering across the whole catalog with a fixed prefix."""

    name = "sequential"

    def __init__(self, prefix: str = "PR") -> None:
        self._prefix = prefix

    def prefix_for(self, category: str) -> str:
        return self._prefix

    def start_number(self, codes: set[str], prefix: str) -> int:
        return max((_suffix(code) for code in codes), default=0) + 1


def code_policy(name: str) -> CodePolicy:
    """Resolve a configured policy name to a policy instance."""
    policies = {
        CategoryCodePolicy.name: CategoryCodePolicy,
        SequentialCodePolicy.name: SequentialCodePolicy,
    }
    try:
        return policies[name.strip().lower()]()
    except KeyError:
        raise ValidationError(
            f"Unknown code policy '{name}' (expected one of: {', '.join(policies)})"
        ) from None
