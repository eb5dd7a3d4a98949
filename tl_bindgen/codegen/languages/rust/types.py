"""
Rust-specific type system for code generation.

Maps schema types to Rust type text, deciding lifetimes, optionality
and heap indirection for recursive fields.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from ...core.generator import GeneratorError
from ...core.naming import NameSanitizer
from ...core.schema import Schema, TlType, TypeKind
from .lifetimes import LifetimeAnalyzer
from .naming import create_rust_sanitizer

LIFETIME = "'a"

OBJECT_UNION = "Object"
FUNCTION_UNION = "Function"

# Modules of the generated file
UNIONS_MODULE = "dynamic"
TYPES_MODULE = "types"
FUNCTIONS_MODULE = "functions"


@dataclass(frozen=True)
class RustType:
    """
    Immutable representation of a rendered Rust type.

    Carries the type text plus the facts the emitters need for
    attributes and generics.
    """

    name: str  # The Rust type text (e.g., "Option<Box<User<'a>>>")
    borrows: bool = False  # Needs the lifetime parameter
    is_boxed: bool = False  # Recursive field behind a Box
    is_string: bool = False  # Rendered as Option<Cow<'a, str>>
    base_name: str = field(default="")  # Referenced record/union name, if any


@dataclass
class RustTypeConfig:
    """Configuration for Rust type mapping behavior."""

    bool_type: str = "bool"
    int32_type: str = "i32"
    int64_type: str = "i64"
    double_type: str = "f64"
    lifetime: str = LIFETIME
    cow_deserializer: str = "crate::cow_de::de_opt_cow_str"


class RustTypeMapper:
    """
    Central engine for mapping schema types to Rust types.

    Supertype references resolve to the union name for multi-variant
    supertypes and to the sole record for single-variant ones.
    """

    def __init__(
        self,
        schema: Schema,
        analyzer: Optional[LifetimeAnalyzer] = None,
        config: Optional[RustTypeConfig] = None,
        sanitizer: Optional[NameSanitizer] = None,
    ):
        """Initialize with the schema being generated."""
        self.schema = schema
        self.analyzer = analyzer or LifetimeAnalyzer(schema)
        self.config = config or RustTypeConfig()
        self.sanitizer = sanitizer or create_rust_sanitizer()
        self._primitive_types = self._build_primitive_type_map()
        self._collect_item_names()

    def _build_primitive_type_map(self) -> Dict[TypeKind, RustType]:
        """Build mapping of primitive kinds to Rust types."""
        lt = self.config.lifetime
        return {
            TypeKind.BOOL: RustType(name=self.config.bool_type),
            TypeKind.INT32: RustType(name=self.config.int32_type),
            TypeKind.INT53: RustType(name=self.config.int64_type),
            TypeKind.INT64: RustType(name=self.config.int64_type),
            TypeKind.DOUBLE: RustType(name=self.config.double_type),
            TypeKind.STRING: RustType(
                name=f"Option<Cow<{lt}, str>>", borrows=True, is_string=True
            ),
            TypeKind.BYTES: RustType(name=f"Option<&{lt} [u8]>", borrows=True),
        }

    def render(self, tl_type: TlType, parent: Optional[str] = None) -> RustType:
        """
        Map a schema type to a Rust type.

        Args:
            tl_type: The type to map
            parent: Name of the supertype whose record holds the field

        Returns:
            Complete RustType
        """
        if tl_type.kind in self._primitive_types:
            return self._primitive_types[tl_type.kind]

        if tl_type.kind == TypeKind.VECTOR:
            # Vec already sits on the heap, its element needs no Box
            element = self.render(tl_type.element)
            return RustType(
                name=f"Vec<{element.name}>",
                borrows=element.borrows,
                base_name=element.base_name,
            )

        if tl_type.kind == TypeKind.SUPERTYPE:
            return self._render_supertype(tl_type.supertype, parent)

        raise GeneratorError(f"Unsupported type kind: {tl_type.kind!r}")

    def _render_supertype(self, name: str, parent: Optional[str]) -> RustType:
        base_name = self.supertype_type_name(name)
        borrows = self.analyzer.supertype_needs_borrow(name)
        boxed = parent is not None and name == parent

        if len(self.schema.get_supertype(name).constructors) == 1:
            text = self.record_path(base_name, TYPES_MODULE)
        else:
            text = self.union_path(base_name)
        if borrows:
            text += f"<{self.config.lifetime}>"
        if boxed:
            text = f"Box<{text}>"

        return RustType(
            name=f"Option<{text}>", borrows=borrows, is_boxed=boxed, base_name=base_name
        )

    def supertype_type_name(self, name: str) -> str:
        """Rust name that a reference to supertype ``name`` resolves to."""
        supertype = self.schema.get_supertype(name)
        if len(supertype.constructors) == 1:
            return self.record_name(supertype.constructors[0].name)
        return self.union_name(name)

    def union_name(self, supertype_name: str) -> str:
        return self.sanitizer.type_name(supertype_name)

    def record_name(self, member_name: str) -> str:
        return self.sanitizer.type_name(member_name)

    # Paths

    def _collect_item_names(self):
        """Names of every item each generated module defines."""
        self.union_names: Set[str] = {OBJECT_UNION, FUNCTION_UNION}
        self.type_records: Set[str] = set()
        for supertype in self.schema.supertypes.values():
            if len(supertype.constructors) > 1:
                self.union_names.add(self.union_name(supertype.name))
            for constructor in supertype.constructors:
                self.type_records.add(self.record_name(constructor.name))
        self.function_records: Set[str] = {
            self.record_name(function.name) for function in self.schema.functions
        }

    def union_path(self, name: str) -> str:
        """
        Path to a union from the records modules.

        A record of the same name would shadow the glob import, so the
        union is then addressed through its module.
        """
        if name in self.type_records or name in self.function_records:
            return f"{UNIONS_MODULE}::{name}"
        return name

    def record_path(self, name: str, module: str) -> str:
        """Path to a record of ``module`` from any other generated module."""
        others = self.function_records if module == TYPES_MODULE else self.type_records
        if name in self.union_names or name in others:
            return f"{module}::{name}"
        return name

    def field_attribute(self, rust_type: RustType) -> Optional[str]:
        """Serde attribute a field of this type needs, if any."""
        if rust_type.is_string:
            return f'#[serde(borrow, deserialize_with = "{self.config.cow_deserializer}")]'
        if rust_type.borrows:
            return "#[serde(borrow)]"
        return None
