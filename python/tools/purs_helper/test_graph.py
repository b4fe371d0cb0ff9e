import json

import pytest
from pydantic import ValidationError

from .core_types import DecodeError
from .graph import ModuleGraph, ModuleGraphNode, decode_module_graph


@pytest.fixture
def sample_graph_json():
    return json.dumps(
        {
            "Main": {"path": "src/Main.purs", "depends": ["App", "Effect"]},
            "App": {"path": "src/App.purs", "depends": ["App.Util", "Prelude"]},
            "App.Util": {"path": "src/App/Util.purs", "depends": ["Prelude"]},
            "Test.Main": {"path": "test/Main.purs", "depends": ["Main"]},
        }
    )


@pytest.fixture
def sample_graph(sample_graph_json):
    return decode_module_graph(sample_graph_json)


# --- Decoding ---


def test_decode_allows_dangling_dependencies():
    graph = decode_module_graph('{"A": {"path": "A.purs", "depends": ["B"]}}')

    assert len(graph) == 1
    assert "A" in graph
    assert "B" not in graph
    assert graph["A"] == ModuleGraphNode(path="A.purs", depends=("B",))


def test_decode_preserves_dependency_order(sample_graph):
    assert sample_graph["Main"].depends == ("App", "Effect")
    assert sample_graph.dependencies_of("App") == ("App.Util", "Prelude")


def test_decode_empty_graph():
    graph = decode_module_graph("{}")
    assert len(graph) == 0


def test_decode_ignores_unknown_node_fields():
    graph = decode_module_graph(
        '{"A": {"path": "A.purs", "depends": [], "kind": "module"}}'
    )
    assert graph["A"].depends == ()


def test_decode_missing_depends():
    with pytest.raises(DecodeError) as exc_info:
        decode_module_graph('{"A": {"path": "A.purs"}}')

    assert exc_info.value.error_code == "INVALID_GRAPH"
    assert exc_info.value.problems == ["A.depends: Field required"]


def test_decode_missing_path():
    with pytest.raises(DecodeError) as exc_info:
        decode_module_graph('{"A": {"depends": []}}')

    assert "A.path" in str(exc_info.value)


@pytest.mark.parametrize(
    "payload, location",
    [
        ('{"A": {"path": 1, "depends": []}}', "A.path"),
        ('{"A": {"path": "A.purs", "depends": "B"}}', "A.depends"),
        ('{"A": {"path": "A.purs", "depends": ["B", 2]}}', "A.depends.1"),
        ('{"A": "A.purs"}', "A"),
        ('[{"path": "A.purs", "depends": []}]', "<root>"),
        ("not json", "<root>"),
        ("", "<root>"),
    ],
)
def test_decode_rejects_malformed_input(payload, location):
    with pytest.raises(DecodeError) as exc_info:
        decode_module_graph(payload)

    assert any(
        problem.startswith(f"{location}:") for problem in exc_info.value.problems
    )


def test_decode_reports_every_problem():
    payload = json.dumps(
        {
            "A": {"path": "A.purs"},
            "B": {"path": "B.purs", "depends": []},
            "C": {"depends": ["A"]},
        }
    )
    with pytest.raises(DecodeError) as exc_info:
        decode_module_graph(payload)

    assert sorted(exc_info.value.problems) == [
        "A.depends: Field required",
        "C.path: Field required",
    ]


# --- Immutability ---


def test_graph_is_immutable(sample_graph):
    with pytest.raises(ValidationError):
        sample_graph["Main"].path = "elsewhere.purs"


def test_graph_mapping_is_read_only(sample_graph):
    with pytest.raises(TypeError):
        sample_graph.root["Extra"] = ModuleGraphNode(path="extra.purs", depends=())
    with pytest.raises(TypeError):
        del sample_graph.root["Main"]
    with pytest.raises(ValidationError):
        sample_graph.root = {}

    assert "Extra" not in sample_graph
    assert len(sample_graph) == 4


# --- Queries ---


def test_transitive_dependencies(sample_graph):
    assert sample_graph.transitive_dependencies("Test.Main") == {
        "Main",
        "App",
        "App.Util",
        "Effect",
        "Prelude",
    }
    assert sample_graph.transitive_dependencies("App.Util") == {"Prelude"}


def test_transitive_dependencies_terminates_on_cycles():
    graph = decode_module_graph(
        json.dumps(
            {
                "A": {"path": "A.purs", "depends": ["B"]},
                "B": {"path": "B.purs", "depends": ["A", "C"]},
            }
        )
    )
    assert graph.transitive_dependencies("A") == {"A", "B", "C"}


def test_transitive_dependencies_unknown_module(sample_graph):
    with pytest.raises(KeyError):
        sample_graph.transitive_dependencies("Prelude")


def test_reverse_dependencies(sample_graph):
    reverse = sample_graph.reverse_dependencies()

    assert reverse["App"] == {"Main"}
    assert reverse["App.Util"] == {"App"}
    assert reverse["Main"] == {"Test.Main"}
    assert reverse["Test.Main"] == set()
    assert "Prelude" not in reverse


def test_modules_in(sample_graph):
    assert sample_graph.modules_in("src/") == ["App", "App.Util", "Main"]
    assert sample_graph.modules_in("test/") == ["Test.Main"]


def test_to_dict_round_trips(sample_graph_json, sample_graph):
    assert sample_graph.to_dict() == json.loads(sample_graph_json)
    assert decode_module_graph(json.dumps(sample_graph.to_dict())) == sample_graph


def test_mapping_helpers(sample_graph):
    assert set(sample_graph) == {"Main", "App", "App.Util", "Test.Main"}
    assert sample_graph.get("Prelude") is None
    assert isinstance(sample_graph, ModuleGraph)
