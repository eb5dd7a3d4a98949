"""
Rust-specific naming utilities and sanitization.

Handles Rust keywords and the field renames they require.
"""

from typing import Tuple

from ...core.naming import NameSanitizer


# Strict, reserved and weak keywords that cannot be plain field names
RUST_RESERVED_WORDS = {
    "abstract",
    "as",
    "async",
    "await",
    "become",
    "box",
    "break",
    "const",
    "continue",
    "crate",
    "do",
    "dyn",
    "else",
    "enum",
    "extern",
    "false",
    "final",
    "fn",
    "for",
    "gen",
    "if",
    "impl",
    "in",
    "let",
    "loop",
    "macro",
    "match",
    "mod",
    "move",
    "mut",
    "override",
    "priv",
    "pub",
    "ref",
    "return",
    "self",
    "Self",
    "static",
    "struct",
    "super",
    "trait",
    "true",
    "try",
    "type",
    "typeof",
    "unsafe",
    "unsized",
    "use",
    "virtual",
    "where",
    "while",
    "yield",
}

# Established spellings; everything else gets a trailing underscore
RUST_FIELD_ALTERNATES = {
    "type": "typ",
}


def create_rust_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Rust."""
    return NameSanitizer(RUST_RESERVED_WORDS, RUST_FIELD_ALTERNATES)


_default_sanitizer = create_rust_sanitizer()


def safe_field_name(name: str) -> Tuple[str, bool]:
    """Rust field identifier for a wire name, plus whether it was renamed."""
    return _default_sanitizer.safe_field_name(name)
