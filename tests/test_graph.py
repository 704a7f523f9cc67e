from alephcode.filters import Filters
from alephcode.graph import build_graph, value_node_id, word_node_id
from alephcode.layout import ForceLayoutEngine


def test_words_link_to_shared_values(pipeline):
    result = pipeline.compute_core_results("אבג ו דה", "aleph-one")
    graph = build_graph(result, Filters())

    ids = [node.id for node in graph.nodes]
    assert ids == [word_node_id("אבג"), word_node_id("ו"), word_node_id("דה"), value_node_id(6)]
    assert {(link.source, link.target, link.layer) for link in graph.links} == {
        ("w:אבג", "v:6", "U"),
        ("w:ו", "v:6", "U"),
    }


def test_node_payloads(pipeline):
    result = pipeline.compute_core_results("אבג ו ו", "aleph-one")
    graph = build_graph(result, Filters())
    by_id = {node.id: node for node in graph.nodes}

    assert by_id["w:ו"].payload["count"] == 2
    assert by_id["w:ו"].type == "word"
    assert by_id["v:6"].payload == {"label": "6", "value": 6}


def test_hidden_words_are_left_out(pipeline):
    result = pipeline.compute_core_results("אבג ו דה", "aleph-one")
    graph = build_graph(result, Filters(Prime=True))
    assert graph.nodes == []
    assert graph.links == []


def test_positions_are_seeded_deterministically(pipeline):
    result = pipeline.compute_core_results("אבג ו דה", "aleph-one")
    first = build_graph(result, Filters(), seed=3)
    second = build_graph(result, Filters(), seed=3)
    assert [(n.x, n.y) for n in first.nodes] == [(n.x, n.y) for n in second.nodes]


def test_graph_feeds_the_layout(pipeline, sample_hebrew_text):
    result = pipeline.compute_core_results(sample_hebrew_text, "aleph-one")
    engine = ForceLayoutEngine(build_graph(result, Filters()))
    engine.run(1000)
    assert not engine.running
    assert len(engine.positions()) == len(engine.nodes)
