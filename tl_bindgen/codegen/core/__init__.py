"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .schema import (
    Schema,
    Supertype,
    Constructor,
    Function,
    Arg,
    TlType,
    TypeKind,
    SchemaError,
    convert_schema_dict,
    parse_type,
)
from .naming import NameSanitizer, capitalize, strip_prefix, sanitize_identifier
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine
from .writer import WriteOutcome, normalize_line_endings, write_if_changed, has_drift

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Schema system - core data structures
    "Schema",
    "Supertype",
    "Constructor",
    "Function",
    "Arg",
    "TlType",
    "TypeKind",
    "SchemaError",
    "convert_schema_dict",
    "parse_type",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "capitalize",
    "strip_prefix",
    "sanitize_identifier",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
    # Output
    "WriteOutcome",
    "normalize_line_endings",
    "write_if_changed",
    "has_drift",
]
