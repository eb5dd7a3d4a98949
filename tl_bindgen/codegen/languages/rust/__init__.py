"""
Rust code generator module.

Generates serde structs and tagged enums from a wire schema.
"""

from .generator import RustGenerator, create_rust_generator
from .lifetimes import LifetimeAnalyzer, create_analyzer
from .naming import create_rust_sanitizer, safe_field_name
from .types import OBJECT_UNION, FUNCTION_UNION, RustType, RustTypeConfig, RustTypeMapper

__all__ = [
    "RustGenerator",
    "create_rust_generator",
    "OBJECT_UNION",
    "FUNCTION_UNION",
    "LifetimeAnalyzer",
    "create_analyzer",
    "create_rust_sanitizer",
    "safe_field_name",
    "RustType",
    "RustTypeConfig",
    "RustTypeMapper",
]
