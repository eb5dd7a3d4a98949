"""
tl_bindgen Code Generation Module

Generates typed bindings from a wire schema and keeps the generated
file in sync with it.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    is_language_supported,
    list_supported_languages,
)
from .core.generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .core.schema import Schema, SchemaError, convert_schema_dict
from .core.config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .core.writer import WriteOutcome, has_drift, normalize_line_endings, write_if_changed
from ..logging_config import get_logger

logger = get_logger(__name__)

# Version info
__version__ = "0.1.0"

ConfigLike = Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]]


def _run(generator: CodeGenerator, schema: Schema) -> GenerationResult:
    result = generate_code(generator, schema)
    if not result.success:
        if isinstance(result.exception, GeneratorError):
            raise result.exception
        raise GeneratorError(result.error_message) from result.exception
    return result


def build_bindings(
    schema: Schema, language: str = "rust", config: ConfigLike = None
) -> GenerationResult:
    """
    Generate bindings text for a schema.

    Raises:
        GeneratorError: If generation fails; the original exception is chained
    """
    return _run(get_generator(language, config), schema)


def generate_bindings(
    schema: Schema,
    output_path: Union[str, Path],
    language: str = "rust",
    config: ConfigLike = None,
    result: Optional[GenerationResult] = None,
) -> WriteOutcome:
    """
    Generate bindings and write them only if the output changed.

    The whole text is built before the output file is touched, so a
    failure leaves the previous output in place.

    Args:
        schema: Schema to generate bindings for
        output_path: Generated file location
        language: Target language name
        config: Generator configuration (object, dict or JSON file path)
        result: Already built bindings for ``schema``; generated when omitted

    Returns:
        WriteOutcome for the output file

    Raises:
        GeneratorError: If generation fails
        OSError: If the output cannot be written
    """
    generator = get_generator(language, config)
    if result is None:
        result = _run(generator, schema)
    line_ending = generator.config.resolved_line_ending()
    return write_if_changed(output_path, result.code, line_ending)


def check_bindings(
    schema: Schema,
    output_path: Union[str, Path],
    language: str = "rust",
    config: ConfigLike = None,
) -> bool:
    """Return True when ``output_path`` is out of date. Never writes."""
    generator = get_generator(language, config)
    result = _run(generator, schema)
    content = normalize_line_endings(
        result.code, generator.config.resolved_line_ending()
    ).encode("utf-8")
    drift = has_drift(output_path, content)
    if drift:
        logger.info("%s is out of date", output_path)
    return drift


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "Schema",
    "SchemaError",
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "WriteOutcome",
    "build_bindings",
    "generate_bindings",
    "check_bindings",
    "convert_schema_dict",
    "generate_code",
    "get_generator",
    "get_language_info",
    "get_registry",
    "is_language_supported",
    "list_supported_languages",
    "load_config",
]
