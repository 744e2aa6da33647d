import json

import pytest

from haunted_api.collection import load_collection, parse_collection
from haunted_api.exceptions import ConfigurationError

YAML_DOC = """
name: Petstore
variables:
  baseUrl: https://petstore.test
  port: 8080
auth:
  type: bearer
  token: "{{token}}"
endpoints:
  - id: list-pets
    name: List pets
    method: get
    url: "{{baseUrl}}/pets"
  - name: Create pet
    method: POST
    url: "{{baseUrl}}/pets"
    body:
      name: Rex
"""


def test_load_yaml_collection(tmp_path):
    path = tmp_path / "petstore.yaml"
    path.write_text(YAML_DOC, encoding="utf-8")

    collection = load_collection(path)

    assert collection.name == "Petstore"
    assert [e.id for e in collection.endpoints] == ["list-pets", "endpoint-2"]
    assert collection.endpoints[0].method == "GET"
    assert collection.endpoints[1].body == {"name": "Rex"}
    assert collection.auth.type == "bearer"
    assert collection.variables["port"] == "8080"


def test_load_json_collection(tmp_path):
    path = tmp_path / "c.json"
    path.write_text(json.dumps({"endpoints": [{"name": "Ping", "url": "https://x.test/ping"}]}), encoding="utf-8")

    collection = load_collection(path)
    assert collection.name == "Untitled collection"
    assert collection.endpoints[0].method == "GET"
    assert collection.auth.type == "none"


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_collection(tmp_path / "nope.yaml")


def test_unparseable_file(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_collection(path)


@pytest.mark.parametrize(
    "raw",
    [
        ["not", "a", "mapping"],
        {"endpoints": []},
        {"endpoints": [{"name": "x", "url": "https://x", "method": "FETCH"}]},
        {"endpoints": [{"name": "x", "url": "   "}]},
        {"endpoints": [{"url": "https://x"}]},
        {"endpoints": [{"name": "x", "url": "https://x"}], "auth": {"type": "oauth9"}},
        {"endpoints": [{"id": "a", "name": "x", "url": "https://x"}, {"id": "a", "name": "y", "url": "https://y"}]},
    ],
)
def test_invalid_collections_rejected(raw):
    with pytest.raises(ConfigurationError):
        parse_collection(raw)
