"""
Concept graph service.

Asks the LLM how a set of concepts relate and returns nodes (with a
hierarchy level, 0 = foundational) and typed edges. Edges whose endpoints
are not among the returned nodes are dropped; unknown relationship labels
fall back to relates-to.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from studynode.models.flashcard import Concept
from studynode.models.graph import GraphEdge, GraphNode, RelationshipType
from studynode.services.llm_service import chat_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert at identifying relationships between concepts. "
    "Analyze the given concepts and determine how they relate to each other.\n\n"
    "Create a concept graph with:\n"
    "1. Nodes representing each concept\n"
    "2. Edges showing relationships between concepts\n"
    "3. Levels indicating hierarchy (0 = foundational, higher = builds on others)\n\n"
    "Relationship types must be one of: depends-on, relates-to, is-part-of, "
    "leads-to, contrasts-with.\n\n"
    "Respond ONLY with valid JSON in exactly this structure:\n"
    '{"nodes": [{"id": "concept-id", "label": "Concept Name", "level": 0}], '
    '"edges": [{"from": "concept-id-1", "to": "concept-id-2", "relationship": "depends-on"}]}'
)


@dataclass
class ConceptGraph:
    nodes: list[GraphNode]
    edges: list[GraphEdge]


def _user_prompt(concepts: list[Concept]) -> str:
    lines = "\n".join(
        f"- ID: {c.id}, Term: {c.term}, Definition: {c.definition}" for c in concepts
    )
    return (
        f"Analyze relationships between these concepts:\n\n{lines}\n\n"
        "Respond with ONLY a valid JSON object."
    )


def _coerce_relationship(value: object) -> RelationshipType:
    try:
        return RelationshipType(str(value).strip().lower())
    except ValueError:
        return RelationshipType.RELATES_TO


def _coerce_level(value: object) -> int:
    try:
        return max(0, int(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0


def parse_concept_graph(result: dict) -> ConceptGraph:
    nodes: list[GraphNode] = []
    seen: set[str] = set()
    for raw in result.get("nodes") or []:
        if not isinstance(raw, dict):
            continue
        node_id = str(raw.get("id") or "").strip()
        if not node_id or node_id in seen:
            continue
        seen.add(node_id)
        nodes.append(
            GraphNode(
                id=node_id,
                label=str(raw.get("label") or node_id).strip(),
                level=_coerce_level(raw.get("level")),
            )
        )

    edges: list[GraphEdge] = []
    for raw in result.get("edges") or []:
        if not isinstance(raw, dict):
            continue
        source = str(raw.get("from") or "").strip()
        target = str(raw.get("to") or "").strip()
        if source not in seen or target not in seen or source == target:
            continue
        edges.append(
            GraphEdge(
                source=source,
                target=target,
                relationship=_coerce_relationship(raw.get("relationship")),
            )
        )
    return ConceptGraph(nodes=nodes, edges=edges)


async def build_concept_graph(concepts: list[Concept]) -> ConceptGraph:
    if not concepts:
        return ConceptGraph(nodes=[], edges=[])
    result = await chat_json(SYSTEM_PROMPT, _user_prompt(concepts))
    graph = parse_concept_graph(result)
    logger.info("Concept graph: %d nodes, %d edges", len(graph.nodes), len(graph.edges))
    return graph
