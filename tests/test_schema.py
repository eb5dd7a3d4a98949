import pytest

from tl_bindgen.codegen.core.schema import (
    BOOL,
    INT53,
    STRING,
    Arg,
    Constructor,
    Schema,
    SchemaError,
    Supertype,
    TlType,
    TypeKind,
    convert_schema_dict,
    parse_type,
)


def test_parse_primitives():
    assert parse_type("Bool") == BOOL
    assert parse_type("bool") == BOOL
    assert parse_type("int53") == INT53
    assert parse_type(" string ") == STRING


def test_parse_vectors_and_references():
    assert parse_type("vector<vector<int32>>") == TlType.vector(TlType.vector(TlType(TypeKind.INT32)))
    assert parse_type("vector<user>") == TlType.vector(TlType.ref("user"))
    assert parse_type("User") == TlType.ref("User")


def test_type_str():
    assert str(parse_type("vector<user>")) == "vector<user>"
    assert str(BOOL) == "Bool"


def test_parse_empty_type():
    with pytest.raises(SchemaError):
        parse_type("  ")


def test_convert_schema_dict(user_schema):
    user = user_schema.get_supertype("user")
    assert [c.name for c in user.constructors] == ["userEmpty", "userFull"]
    assert user.constructors[1].args == (Arg("id", INT53), Arg("name", STRING))
    assert all(c.supertype == "user" for c in user.constructors)

    (function,) = user_schema.functions
    assert function.name == "getUser"
    assert function.supertype is None
    assert function.result == TlType.ref("user")


def test_unknown_supertype_lookup(user_schema):
    with pytest.raises(SchemaError, match="Unknown supertype"):
        user_schema.get_supertype("chat")


def test_duplicate_wire_tags_rejected():
    with pytest.raises(SchemaError, match="Duplicate wire tag"):
        convert_schema_dict(
            {
                "types": [
                    {"name": "a", "constructors": [{"name": "same"}]},
                    {"name": "b", "constructors": [{"name": "same"}]},
                ]
            }
        )


def test_dangling_reference_rejected():
    with pytest.raises(SchemaError, match="Unknown supertype chat"):
        convert_schema_dict(
            {
                "types": [
                    {
                        "name": "user",
                        "constructors": [
                            {"name": "userFull", "args": [{"name": "chats", "type": "vector<chat>"}]}
                        ],
                    }
                ]
            }
        )


def test_duplicate_functions_rejected():
    with pytest.raises(SchemaError, match="Duplicate function"):
        convert_schema_dict({"functions": [{"name": "ping"}, {"name": "ping"}]})


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"types": [{"constructors": []}]},
        {"types": [{"name": "a", "constructors": [{"args": []}]}]},
        {"types": [{"name": "a", "constructors": [{"name": "aX", "args": [{"name": "x"}]}]}]},
        {"functions": ["ping"]},
    ],
)
def test_malformed_descriptions(data):
    with pytest.raises(SchemaError):
        convert_schema_dict(data)


def test_owner_mismatch():
    schema = Schema(
        supertypes={"a": Supertype("a", (Constructor("aNode", supertype="b"),))}
    )
    with pytest.raises(SchemaError, match="owned by b"):
        schema.validate()
