"""
Naming utilities for safe code generation.

Handles identifier casing, prefix stripping and reserved word conflicts
across target languages.
"""

import re
from typing import Dict, Optional, Set, Tuple


def capitalize(name: str) -> str:
    """Uppercase the first character only (``userFull`` -> ``UserFull``)."""
    return name[:1].upper() + name[1:]


def strip_prefix(name: str, prefix: str) -> str:
    """
    Remove ``prefix`` from the front of a capitalized name.

    The prefix is only removed when what remains is non-empty and starts
    with an uppercase letter, so ``UserFull`` loses ``User`` but
    ``Username`` and ``User`` are returned unchanged.

    Args:
        name: Capitalized identifier
        prefix: Prefix to remove, usually the enclosing union name

    Returns:
        The shortened identifier, or ``name`` unchanged
    """
    if not prefix or len(prefix) >= len(name):
        return name
    if name.startswith(prefix) and name[len(prefix)].isupper():
        return name[len(prefix):]
    return name


def sanitize_identifier(name: str) -> str:
    """Replace characters that are not ASCII letters or digits with ``_``."""
    cleaned = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if cleaned and cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned


class NameSanitizer:
    """Maps schema names onto identifiers that are legal in the target language."""

    def __init__(
        self,
        reserved_words: Set[str] = None,
        alternates: Optional[Dict[str, str]] = None,
        suffix_on_conflict: str = "_",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            alternates: Preferred spelling for specific reserved words
            suffix_on_conflict: Suffix for reserved words without an alternate
        """
        self.reserved_words = reserved_words or set()
        self.alternates = alternates or {}
        self.suffix_on_conflict = suffix_on_conflict
        self._name_cache: Dict[str, Tuple[str, bool]] = {}

    def safe_field_name(self, name: str) -> Tuple[str, bool]:
        """
        Sanitize a field name.

        Returns:
            Tuple of (identifier, renamed). ``renamed`` is True when the
            identifier differs from the wire name, in which case the caller
            must preserve the original name for serialization.
        """
        if name in self._name_cache:
            return self._name_cache[name]

        cleaned = sanitize_identifier(name) or "field"
        if cleaned in self.reserved_words:
            cleaned = self.alternates.get(cleaned, f"{cleaned}{self.suffix_on_conflict}")

        result = (cleaned, cleaned != name)
        self._name_cache[name] = result
        return result

    def type_name(self, name: str) -> str:
        """Sanitize and capitalize a type name."""
        return capitalize(sanitize_identifier(name))

    def is_reserved(self, name: str) -> bool:
        return name in self.reserved_words
