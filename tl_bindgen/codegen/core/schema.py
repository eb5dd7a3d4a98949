"""
Core schema representation for code generation.

Converts a schema description (supertypes, constructors and functions)
into a normalized, immutable internal format that generators can work
with consistently.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Any, Iterator
from enum import Enum


class SchemaError(Exception):
    """Exception raised for structurally invalid schema descriptions."""

    pass


class TypeKind(Enum):
    """Supported wire types."""

    BOOL = "Bool"
    INT32 = "int32"
    INT53 = "int53"
    INT64 = "int64"
    DOUBLE = "double"
    STRING = "string"
    BYTES = "bytes"
    VECTOR = "vector"
    SUPERTYPE = "supertype"


PRIMITIVE_KINDS = {
    kind.value.lower(): kind
    for kind in TypeKind
    if kind not in (TypeKind.VECTOR, TypeKind.SUPERTYPE)
}

_VECTOR_RE = re.compile(r"^vector\s*<(.+)>$", re.IGNORECASE)


@dataclass(frozen=True)
class TlType:
    """
    A wire type.

    Supertype references hold the supertype name, a key into
    Schema.supertypes, so cyclic graphs stay plain values.
    """

    kind: TypeKind
    element: Optional["TlType"] = None  # VECTOR only
    supertype: Optional[str] = None  # SUPERTYPE only

    @classmethod
    def vector(cls, element: "TlType") -> "TlType":
        return cls(TypeKind.VECTOR, element=element)

    @classmethod
    def ref(cls, supertype: str) -> "TlType":
        return cls(TypeKind.SUPERTYPE, supertype=supertype)

    def __str__(self) -> str:
        if self.kind == TypeKind.VECTOR:
            return f"vector<{self.element}>"
        if self.kind == TypeKind.SUPERTYPE:
            return self.supertype
        return self.kind.value


# Shared primitive instances
BOOL = TlType(TypeKind.BOOL)
INT32 = TlType(TypeKind.INT32)
INT53 = TlType(TypeKind.INT53)
INT64 = TlType(TypeKind.INT64)
DOUBLE = TlType(TypeKind.DOUBLE)
STRING = TlType(TypeKind.STRING)
BYTES = TlType(TypeKind.BYTES)


@dataclass(frozen=True)
class Arg:
    """A single named, typed argument of a constructor or function."""

    name: str
    type: TlType


@dataclass(frozen=True)
class Constructor:
    """One concrete variant of a supertype."""

    name: str  # Wire tag
    args: Tuple[Arg, ...] = ()
    supertype: Optional[str] = None  # Owning supertype name, None for functions


@dataclass(frozen=True)
class Function(Constructor):
    """An RPC signature; structurally a constructor without an owner."""

    result: Optional[TlType] = None


@dataclass(frozen=True)
class Supertype:
    """An abstract type with one or more constructors."""

    name: str
    constructors: Tuple[Constructor, ...] = ()


@dataclass(frozen=True)
class Schema:
    """The full set of supertypes and functions describing a wire protocol."""

    supertypes: Dict[str, Supertype] = field(default_factory=dict)
    functions: Tuple[Function, ...] = ()

    def get_supertype(self, name: str) -> Supertype:
        """Resolve a supertype reference."""
        try:
            return self.supertypes[name]
        except KeyError:
            raise SchemaError(f"Unknown supertype: {name}") from None

    def iter_constructors(self) -> Iterator[Constructor]:
        """Iterate over every constructor of every supertype, in order."""
        for supertype in self.supertypes.values():
            yield from supertype.constructors

    def validate(self) -> None:
        """
        Check structural invariants.

        Raises:
            SchemaError: On duplicate wire tags, dangling supertype
                references or constructors pointing at the wrong owner.
        """
        seen = set()
        for supertype in self.supertypes.values():
            for constructor in supertype.constructors:
                if constructor.supertype != supertype.name:
                    raise SchemaError(
                        f"Constructor {constructor.name} is listed under "
                        f"{supertype.name} but owned by {constructor.supertype}"
                    )
                if constructor.name in seen:
                    raise SchemaError(f"Duplicate wire tag: {constructor.name}")
                seen.add(constructor.name)
                self._check_args(constructor)

        function_names = set()
        for function in self.functions:
            if function.name in function_names:
                raise SchemaError(f"Duplicate function name: {function.name}")
            function_names.add(function.name)
            self._check_args(function)
            if function.result is not None:
                self._check_type(function.result, function.name)

    def _check_args(self, member: Constructor) -> None:
        for arg in member.args:
            self._check_type(arg.type, f"{member.name}.{arg.name}")

    def _check_type(self, tl_type: TlType, where: str) -> None:
        while tl_type.kind == TypeKind.VECTOR:
            if tl_type.element is None:
                raise SchemaError(f"Vector without element type in {where}")
            tl_type = tl_type.element
        if tl_type.kind == TypeKind.SUPERTYPE and tl_type.supertype not in self.supertypes:
            raise SchemaError(f"Unknown supertype {tl_type.supertype} in {where}")


def parse_type(type_name: str) -> TlType:
    """
    Parse a type string such as ``int53``, ``vector<string>`` or ``User``.

    Primitive names win over supertype names, so a ``Bool`` supertype in a
    schema is always read as the primitive.
    """
    text = type_name.strip()
    if not text:
        raise SchemaError("Empty type name")

    match = _VECTOR_RE.match(text)
    if match:
        return TlType.vector(parse_type(match.group(1)))

    primitive = PRIMITIVE_KINDS.get(text.lower())
    if primitive is not None:
        return TlType(primitive)

    return TlType.ref(text)


def convert_schema_dict(data: Dict[str, Any]) -> Schema:
    """
    Convert a JSON schema description to the internal Schema representation.

    Args:
        data: Dict with ``types`` (supertypes and their constructors) and
            ``functions`` lists

    Returns:
        Schema: Validated, immutable schema
    """
    if not isinstance(data, dict):
        raise SchemaError("Schema description must be a JSON object")

    def convert_args(raw_args: List[Dict[str, Any]], owner: str) -> Tuple[Arg, ...]:
        args = []
        for raw_arg in raw_args or []:
            try:
                args.append(Arg(name=raw_arg["name"], type=parse_type(raw_arg["type"])))
            except (KeyError, TypeError) as e:
                raise SchemaError(f"Malformed argument in {owner}: {raw_arg!r}") from e
        return tuple(args)

    supertypes: Dict[str, Supertype] = {}
    for raw_type in data.get("types", []):
        try:
            type_name = raw_type["name"]
        except (KeyError, TypeError) as e:
            raise SchemaError(f"Malformed type entry: {raw_type!r}") from e

        if type_name in supertypes:
            raise SchemaError(f"Duplicate supertype: {type_name}")

        constructors = []
        for raw_cons in raw_type.get("constructors", []):
            if "name" not in raw_cons:
                raise SchemaError(f"Constructor without name in {type_name}")
            constructors.append(
                Constructor(
                    name=raw_cons["name"],
                    args=convert_args(raw_cons.get("args"), raw_cons["name"]),
                    supertype=type_name,
                )
            )
        supertypes[type_name] = Supertype(name=type_name, constructors=tuple(constructors))

    functions = []
    for raw_func in data.get("functions", []):
        if not isinstance(raw_func, dict) or "name" not in raw_func:
            raise SchemaError(f"Malformed function entry: {raw_func!r}")
        result = raw_func.get("result")
        functions.append(
            Function(
                name=raw_func["name"],
                args=convert_args(raw_func.get("args"), raw_func["name"]),
                result=parse_type(result) if result else None,
            )
        )

    schema = Schema(supertypes=supertypes, functions=tuple(functions))
    schema.validate()
    return schema
