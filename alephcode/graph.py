from __future__ import annotations

import random

from .analysis import AnalysisResult, connection_values
from .filters import Filters, get_word_values, is_value_visible, is_word_visible
from .layout import Graph, GraphLink, GraphNode, seed_positions


def word_node_id(word: str) -> str:
    return f"w:{word}"


def value_node_id(value: int) -> str:
    return f"v:{value}"


def build_graph(
    result: AnalysisResult,
    filters: Filters,
    width: float = 800.0,
    height: float = 600.0,
    seed: int | None = 0,
) -> Graph:
    """
    Word/value graph for the network view.

    Value nodes are the visible values shared by two or more words; each
    visible word links to the value nodes it carries, tagged with the band
    the value sits on.
    """
    shared = connection_values(result, filters)
    nodes: list[GraphNode] = []
    links: list[GraphLink] = []

    for wd in result.all_words:
        if not is_word_visible(wd, filters):
            continue
        nodes.append(
            GraphNode(
                id=word_node_id(wd.word),
                type="word",
                payload={"label": wd.word, "units": wd.units, "dr": wd.dr, "count": result.word_counts[wd.word]},
            )
        )
        for v in get_word_values(wd):
            if v.value in shared and is_value_visible(v.layer, v.is_prime, filters):
                links.append(GraphLink(source=word_node_id(wd.word), target=value_node_id(v.value), layer=v.layer))

    for value in sorted(shared, reverse=True):
        nodes.append(GraphNode(id=value_node_id(value), type="value", payload={"label": str(value), "value": value}))

    rng = random.Random(seed) if seed is not None else random.Random()
    seed_positions(nodes, width, height, jitter=min(width, height) / 50, rng=rng)
    return Graph(nodes=nodes, links=links)
