import pytest

from tl_bindgen.codegen import build_bindings, convert_schema_dict, generate_code
from tl_bindgen.codegen.core.generator import GeneratorError
from tl_bindgen.codegen.languages.rust import RustGenerator


def render(schema, **config):
    config.setdefault("line_ending", "lf")
    return build_bindings(schema, "rust", config).code


def test_file_layout(user_schema):
    code = render(user_schema)
    assert code.startswith(
        "//! Auto-generated JSON messages\n"
        "// Auto-generated, do not edit\n"
        "use serde::{Serialize, Deserialize};\n"
        "use std::{borrow::Cow, convert::TryFrom};\n"
    )
    assert code.index("pub mod dynamic") < code.index("pub mod types") < code.index("pub mod functions")
    assert code.endswith("}\n")
    assert "\n\n\n" not in code


def test_user_records(user_schema):
    code = render(user_schema)
    assert "    /// Super type: user\n" in code
    assert '    #[serde(rename = "userEmpty")]\n    pub struct UserEmpty;\n' in code
    assert (
        '    #[serde(rename = "userFull")]\n'
        "    pub struct UserFull<'a> {\n"
        "        pub id: i64,\n"
        '        #[serde(borrow, deserialize_with = "crate::cow_de::de_opt_cow_str")]\n'
        "        pub name: Option<Cow<'a, str>>,\n"
        "    }\n"
    ) in code


def test_user_union(user_schema):
    code = render(user_schema)
    assert '    #[serde(tag = "@type")]\n    pub enum User<\'a> {\n' in code
    assert '        #[serde(rename = "userEmpty")]\n        Empty(UserEmpty),\n' in code
    assert '        #[serde(rename = "userFull")]\n        Full(#[serde(borrow)] UserFull<\'a>),\n' in code
    assert "impl<'a> From<UserEmpty> for User<'a> {" in code
    assert "impl<'a> From<UserFull<'a>> for User<'a> {" in code
    assert "Self::Full(v)" in code


def test_aggregate_conversions(user_schema):
    code = render(user_schema)
    assert "pub enum Object<'a> {" in code
    assert "UserFull(#[serde(borrow)] UserFull<'a>)," in code
    assert "impl<'a> From<UserFull<'a>> for Object<'a> {" in code

    assert "impl<'a> TryFrom<Object<'a>> for User<'a> {" in code
    assert "type Error = Object<'a>;" in code
    assert "Object::UserEmpty(v) => Ok(Self::Empty(v))," in code
    assert "Object::UserFull(v) => Ok(Self::Full(v))," in code
    assert "v => Err(v)," in code

    assert "impl<'a> From<User<'a>> for Object<'a> {" in code
    assert "User::Full(v) => Self::UserFull(v)," in code


def test_function_record(user_schema):
    code = render(user_schema)
    assert "    /// Returns: user\n" in code
    assert (
        '    #[serde(rename = "getUser")]\n'
        "    pub struct GetUser {\n"
        "        pub user_id: i64,\n"
        "    }\n"
    ) in code
    assert "pub enum Function {" in code
    assert '#[serde(rename = "getUser")]\n        GetUser(GetUser),' in code
    assert "impl From<GetUser> for Function {" in code


def test_single_variant_supertype_has_no_union():
    schema = convert_schema_dict(
        {"types": [{"name": "photo", "constructors": [{"name": "photo", "args": [{"name": "id", "type": "int64"}]}]}]}
    )
    code = render(schema)
    assert "pub struct Photo {" in code
    assert "pub enum Photo" not in code
    assert "TryFrom<Object" not in code
    assert "Photo(Photo)," in code


def test_recursive_fields(recursive_schema):
    code = render(recursive_schema)
    assert "pub left: Option<Box<Node>>," in code
    assert "pub right: Option<Box<Node>>," in code
    # mutual recursion goes through the enums, no Box needed
    assert "pub b: Option<B>," in code
    assert "pub a: Option<A>," in code
    assert "pub children: Vec<Option<TreeNode<'a>>>," in code
    assert "pub struct TreeNode<'a> {" in code


def test_borrow_propagates_to_containers(user_description):
    chat = {
        "name": "chat",
        "constructors": [
            {"name": "chatInfo", "args": [{"name": "owner", "type": "user"}]},
            {"name": "chatCounter", "args": [{"name": "value", "type": "int32"}]},
        ],
    }
    schema = convert_schema_dict({"types": user_description["types"] + [chat]})
    code = render(schema)
    assert "pub struct ChatInfo<'a> {" in code
    assert "        #[serde(borrow)]\n        pub owner: Option<User<'a>>," in code
    assert "pub enum Chat<'a> {" in code
    # A sibling without borrowed data stays lifetime free
    assert "pub struct ChatCounter {" in code
    assert "Counter(ChatCounter)," in code


def test_reserved_field_names():
    schema = convert_schema_dict(
        {
            "types": [
                {
                    "name": "message",
                    "constructors": [
                        {
                            "name": "message",
                            "args": [
                                {"name": "type", "type": "string"},
                                {"name": "match", "type": "int32"},
                            ],
                        }
                    ],
                }
            ]
        }
    )
    code = render(schema)
    assert (
        '        #[serde(rename = "type")]\n'
        '        #[serde(borrow, deserialize_with = "crate::cow_de::de_opt_cow_str")]\n'
        "        pub typ: Option<Cow<'a, str>>,\n"
    ) in code
    assert '        #[serde(rename = "match")]\n        pub match_: i32,\n' in code


def test_variant_identifier_collision():
    schema = convert_schema_dict(
        {"types": [{"name": "msg", "constructors": [{"name": "msgText"}, {"name": "MsgText"}]}]}
    )
    with pytest.raises(GeneratorError, match="Variant identifier Text in union Msg"):
        render(schema)


def test_union_name_collision():
    schema = convert_schema_dict(
        {
            "types": [
                {"name": "user", "constructors": [{"name": "userA"}, {"name": "userB"}]},
                {"name": "User", "constructors": [{"name": "UserC"}, {"name": "UserD"}]},
            ]
        }
    )
    with pytest.raises(GeneratorError, match="Union name User"):
        render(schema)


def test_union_name_collides_with_aggregate():
    schema = convert_schema_dict(
        {"types": [{"name": "object", "constructors": [{"name": "objectA"}, {"name": "objectB"}]}]}
    )
    with pytest.raises(GeneratorError, match="Union name Object"):
        render(schema)


def test_deterministic_output(user_schema):
    assert render(user_schema) == render(user_schema)


def test_configuration_changes_output(user_schema):
    code = render(
        user_schema,
        add_comments=False,
        use_tabs=True,
        tag_field="_",
        derives=["Serialize", "Deserialize"],
    )
    assert "Super type" not in code
    assert "Every constructor" not in code
    assert '\t#[serde(tag = "_")]\n' in code
    assert "\t#[derive(Serialize, Deserialize)]\n" in code
    assert "\t\tpub id: i64,\n" in code


def test_generation_metadata(user_schema, generator):
    result = generate_code(generator, user_schema)
    assert result.success
    assert result.metadata["language"] == "rust"
    assert result.metadata["union_count"] == 3
    assert result.metadata["record_count"] == 3
    assert result.metadata["borrowing_supertypes"] == 1
    assert result.metadata["function_count"] == 1


def test_generate_code_captures_errors(generator):
    schema = convert_schema_dict(
        {"types": [{"name": "msg", "constructors": [{"name": "msgText"}, {"name": "MsgText"}]}]}
    )
    result = generate_code(generator, schema)
    assert not result.success
    assert isinstance(result.exception, GeneratorError)
    assert result.code == ""


def test_validation_warnings():
    schema = convert_schema_dict(
        {
            "types": [
                {"name": "nothing", "constructors": []},
                {
                    "name": "holder",
                    "constructors": [
                        {
                            "name": "holder",
                            "args": [
                                {"name": "type", "type": "int32"},
                                {"name": "empty", "type": "vector<nothing>"},
                            ],
                        }
                    ],
                },
            ]
        }
    )
    warnings = RustGenerator({"derives": ["Clone"]}).validate_schemas(schema)
    assert "Supertype 'nothing' has no constructors" in warnings
    assert any("holder.type renamed to typ" in w for w in warnings)
    assert any("references nothing" in w for w in warnings)
    assert any(w.startswith("Configuration: Serialize/Deserialize") for w in warnings)


def test_constructor_named_after_its_supertype():
    schema = convert_schema_dict(
        {
            "types": [
                {
                    "name": "message",
                    "constructors": [
                        {"name": "messageEmpty"},
                        {"name": "message", "args": [{"name": "text", "type": "string"}]},
                    ],
                },
                {"name": "chat", "constructors": [{"name": "chat", "args": [{"name": "last", "type": "message"}]}]},
            ]
        }
    )
    code = render(schema)
    assert "pub enum Message<'a> {" in code
    assert "pub struct Message<'a> {" in code
    assert "        Message(#[serde(borrow)] types::Message<'a>),\n" in code
    assert "impl<'a> From<types::Message<'a>> for Message<'a> {" in code
    assert "impl<'a> From<Message<'a>> for Message<'a>" not in code
    assert "impl<'a> From<types::Message<'a>> for Object<'a> {" in code
    assert "impl<'a> From<Message<'a>> for Object<'a> {" in code
    assert "pub last: Option<dynamic::Message<'a>>," in code
    # names without a clash stay unqualified
    assert "Empty(MessageEmpty)," in code
    assert "Chat(#[serde(borrow)] Chat<'a>)," in code


def test_function_named_like_a_type():
    schema = convert_schema_dict(
        {
            "types": [{"name": "status", "constructors": [{"name": "status"}]}],
            "functions": [{"name": "status", "args": [{"name": "value", "type": "status"}]}],
        }
    )
    code = render(schema)
    assert "pub value: Option<types::Status>," in code
    assert "Status(types::Status)," in code
    assert "Status(functions::Status)," in code


@pytest.mark.parametrize("names", [("type", "typ"), ("foo-bar", "foo_bar")])
def test_field_identifier_collision(names):
    schema = convert_schema_dict(
        {
            "types": [
                {
                    "name": "item",
                    "constructors": [
                        {"name": "item", "args": [{"name": name, "type": "int32"} for name in names]}
                    ],
                }
            ]
        }
    )
    with pytest.raises(GeneratorError, match="Field identifier .* in item"):
        render(schema)
