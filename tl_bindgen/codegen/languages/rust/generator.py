"""
Rust code generator implementation.

Generates serde-ready Rust structs for every constructor and function,
tagged enums for every multi-variant supertype plus the schema-wide
``Object`` and ``Function`` aggregates, and the conversions between them.
"""

from typing import Dict, List, Optional, Any, Sequence
from pathlib import Path

from ....logging_config import get_logger
from ...core.config import get_config_manager
from ...core.generator import CodeGenerator, GeneratorError
from ...core.naming import strip_prefix
from ...core.schema import Constructor, Schema, TypeKind
from .lifetimes import LifetimeAnalyzer
from .naming import create_rust_sanitizer
from .types import (
    FUNCTION_UNION,
    FUNCTIONS_MODULE,
    OBJECT_UNION,
    TYPES_MODULE,
    RustTypeConfig,
    RustTypeMapper,
)

logger = get_logger(__name__)

class RustGenerator(CodeGenerator):
    """Code generator for Rust types with serde attributes."""

    def __init__(self, config=None):
        """Initialize Rust generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_rust_sanitizer()
        self.type_config = self._build_type_config()

        # Per-run state
        self.analyzer: Optional[LifetimeAnalyzer] = None
        self.type_mapper: Optional[RustTypeMapper] = None
        self.last_stats: Dict[str, Any] = {}

    def get_template_directory(self) -> Optional[Path]:
        """Return the Rust templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def _build_type_config(self) -> RustTypeConfig:
        """Build RustTypeConfig from generator config."""
        custom = self.config.custom
        return RustTypeConfig(
            bool_type=custom.get("bool_type", "bool"),
            int32_type=custom.get("int32_type", "i32"),
            int64_type=custom.get("int64_type", "i64"),
            double_type=custom.get("double_type", "f64"),
            cow_deserializer=self.config.cow_deserializer,
        )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "rust"

    @property
    def file_extension(self) -> str:
        """Return Rust file extension."""
        return ".rs"

    def _prepare(self, schema: Schema) -> RustTypeMapper:
        """Start a run over ``schema`` with fresh analysis state."""
        self.analyzer = LifetimeAnalyzer(schema)
        self.type_mapper = RustTypeMapper(
            schema, self.analyzer, self.type_config, self.sanitizer
        )
        return self.type_mapper

    def generate(self, schema: Schema) -> str:
        """Generate the complete Rust module for a schema."""
        self._prepare(schema)

        unions = self.generate_unions(schema)
        types = [
            self.generate_record(constructor)
            for constructor in schema.iter_constructors()
        ]
        functions = [self.generate_record(function) for function in schema.functions]

        self.last_stats = {
            "union_count": len(unions),
            "record_count": len(types) + len(functions),
            "borrowing_supertypes": len(self.analyzer.borrowing_supertypes()),
        }
        logger.debug("Generated %(union_count)d unions and %(record_count)d records", self.last_stats)

        return self.render_template(
            "file.rs.j2",
            {
                "module_doc": self.config.module_doc,
                "unions": "\n".join(unions).rstrip("\n"),
                "types": "\n".join(types).rstrip("\n"),
                "functions": "\n".join(functions).rstrip("\n"),
            },
        )

    # Struct emission

    def generate_record(self, member: Constructor) -> str:
        """Render the struct for one constructor or function."""
        mapper = self.type_mapper
        fields = []
        seen: Dict[str, str] = {}
        for arg in member.args:
            rust_type = mapper.render(arg.type, member.supertype)
            field_name, renamed = self.sanitizer.safe_field_name(arg.name)
            if field_name in seen:
                raise GeneratorError(
                    f"Field identifier {field_name} in {member.name} is produced by "
                    f"both {seen[field_name]} and {arg.name}"
                )
            seen[field_name] = arg.name
            fields.append(
                {
                    "name": field_name,
                    "type": rust_type.name,
                    "rename": arg.name if renamed else None,
                    "attribute": mapper.field_attribute(rust_type),
                }
            )

        doc = []
        if self.config.add_comments:
            if member.supertype is not None:
                doc.append(f"Super type: {member.supertype}")
            elif getattr(member, "result", None) is not None:
                doc.append(f"Returns: {member.result}")

        borrows = self.analyzer.args_need_borrow(member.args)
        return self.render_template(
            "struct.rs.j2",
            {
                "name": mapper.record_name(member.name),
                "wire_name": member.name,
                "lifetime": self.type_config.lifetime if borrows else None,
                "fields": fields,
                "doc": doc,
                "derives": ", ".join(self.config.derives),
            },
        )

    # Union emission

    def generate_unions(self, schema: Schema) -> List[str]:
        """Render every union: per-supertype ones, then the two aggregates."""
        mapper = self.type_mapper
        object_members = list(schema.iter_constructors())
        object_lifetime = self._union_lifetime(object_members)
        aggregate = {"name": OBJECT_UNION, "lifetime": object_lifetime}

        union_names = {OBJECT_UNION: "<aggregate>", FUNCTION_UNION: "<aggregate>"}
        rendered = []
        for supertype in schema.supertypes.values():
            if len(supertype.constructors) <= 1:
                continue

            name = mapper.union_name(supertype.name)
            if name in union_names:
                raise GeneratorError(
                    f"Union name {name} of supertype {supertype.name} collides "
                    f"with {union_names[name]}"
                )
            union_names[name] = supertype.name

            rendered.append(
                self.generate_union(name, supertype.constructors, aggregate=aggregate)
            )

        rendered.append(
            self.generate_union(
                OBJECT_UNION, object_members, description="Every constructor of every type"
            )
        )
        rendered.append(
            self.generate_union(
                FUNCTION_UNION, schema.functions, description="Every API function"
            )
        )
        return rendered

    def generate_union(
        self,
        name: str,
        members: Sequence[Constructor],
        aggregate: Optional[Dict[str, Any]] = None,
        description: Optional[str] = None,
    ) -> str:
        """
        Render one tagged enum with a ``From`` impl per variant.

        When ``aggregate`` is given, conversions to and from that aggregate
        union are emitted as well.
        """
        variants = []
        seen: Dict[str, str] = {}
        for member in members:
            record = self.type_mapper.record_name(member.name)
            ident = strip_prefix(record, name)
            if ident in seen:
                raise GeneratorError(
                    f"Variant identifier {ident} in union {name} is produced by "
                    f"both {seen[ident]} and {member.name}"
                )
            seen[ident] = member.name

            module = TYPES_MODULE if member.supertype is not None else FUNCTIONS_MODULE
            borrows = self.analyzer.args_need_borrow(member.args)
            variant = {
                "wire_name": member.name,
                "ident": ident,
                "borrows": borrows,
                "payload": self.type_mapper.record_path(record, module)
                + (f"<{self.type_config.lifetime}>" if borrows else ""),
            }
            if aggregate is not None:
                variant["aggregate_ident"] = strip_prefix(record, aggregate["name"])
            variants.append(variant)

        return self.render_template(
            "union.rs.j2",
            {
                "name": name,
                "lifetime": self._union_lifetime(members),
                "variants": variants,
                "aggregate": aggregate,
                "description": description if self.config.add_comments else None,
                "derives": ", ".join(self.config.derives),
                "tag_field": self.config.tag_field,
            },
        )

    def _union_lifetime(self, members: Sequence[Constructor]) -> Optional[str]:
        if self.analyzer.members_need_borrow(members):
            return self.type_config.lifetime
        return None

    def validate_schemas(self, schema: Schema) -> List[str]:
        """Validate a schema for Rust generation."""
        warnings = super().validate_schemas(schema)

        members = list(schema.iter_constructors()) + list(schema.functions)
        for member in members:
            for arg in member.args:
                field_name, renamed = self.sanitizer.safe_field_name(arg.name)
                if renamed:
                    warnings.append(
                        f"Field {member.name}.{arg.name} renamed to {field_name} "
                        f"to avoid Rust naming conflicts"
                    )

                inner = arg.type
                while inner.kind == TypeKind.VECTOR:
                    inner = inner.element
                if inner.kind == TypeKind.SUPERTYPE:
                    target = schema.supertypes.get(inner.supertype)
                    if target is not None and not target.constructors:
                        warnings.append(
                            f"Field {member.name}.{arg.name} references {inner.supertype}, "
                            f"which has no constructors"
                        )

        for warning in self.config_warnings():
            warnings.append(f"Configuration: {warning}")

        return warnings

    def config_warnings(self) -> List[str]:
        """Configuration problems that would produce broken Rust."""
        return get_config_manager().validate_config(self.config)


def create_rust_generator(config: Optional[Dict[str, Any]] = None) -> RustGenerator:
    """Create a Rust generator with default configuration."""
    return RustGenerator(config)
