import json
import logging
from pathlib import Path

import pytest

from tl_bindgen.codegen import convert_schema_dict
from tl_bindgen.codegen.languages.rust import RustGenerator


USER_TYPES = [
    {
        "name": "user",
        "constructors": [
            {"name": "userEmpty", "args": []},
            {
                "name": "userFull",
                "args": [
                    {"name": "id", "type": "int53"},
                    {"name": "name", "type": "string"},
                ],
            },
        ],
    }
]

GET_USER = {
    "name": "getUser",
    "args": [{"name": "user_id", "type": "int53"}],
    "result": "user",
}


@pytest.fixture(autouse=True)
def _restore_package_logger():
    # The CLI installs handlers and disables propagation on the package logger
    logger = logging.getLogger("tl_bindgen")
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture()
def user_description():
    return {"types": USER_TYPES, "functions": [GET_USER]}


@pytest.fixture()
def user_schema(user_description):
    """Supertype `user` with an empty and a full constructor, plus `getUser`."""
    return convert_schema_dict(user_description)


@pytest.fixture()
def recursive_schema():
    """Self-referential, mutually recursive and vector-recursive supertypes."""
    return convert_schema_dict(
        {
            "types": [
                {
                    "name": "node",
                    "constructors": [
                        {"name": "nodeLeaf", "args": [{"name": "value", "type": "int32"}]},
                        {
                            "name": "nodeBranch",
                            "args": [
                                {"name": "left", "type": "node"},
                                {"name": "right", "type": "node"},
                            ],
                        },
                    ],
                },
                {
                    "name": "a",
                    "constructors": [
                        {"name": "aLink", "args": [{"name": "b", "type": "b"}]},
                        {"name": "aEnd", "args": []},
                    ],
                },
                {
                    "name": "b",
                    "constructors": [
                        {"name": "bLink", "args": [{"name": "a", "type": "a"}]},
                        {"name": "bEnd", "args": [{"name": "flag", "type": "Bool"}]},
                    ],
                },
                {
                    "name": "tree",
                    "constructors": [
                        {
                            "name": "treeNode",
                            "args": [
                                {"name": "children", "type": "vector<tree>"},
                                {"name": "label", "type": "string"},
                            ],
                        }
                    ],
                },
            ]
        }
    )


@pytest.fixture()
def generator():
    return RustGenerator({"line_ending": "lf"})


@pytest.fixture()
def schema_file(tmp_path: Path, user_description):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(user_description), encoding="utf-8")
    return path
