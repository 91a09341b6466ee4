import asyncio

import pytest

from studynode.models.flashcard import Concept, Difficulty
from studynode.models.graph import RelationshipType
from studynode.services import concept_extractor, concept_graph, flashcard_generator
from tests.helpers import stub_llm


def test_extract_concepts_cleans_reply(monkeypatch: pytest.MonkeyPatch):
    calls = stub_llm(
        monkeypatch,
        concept_extractor,
        {
            "concepts": [
                {"id": "1", "term": " Osmosis ", "definition": "Water moves", "difficulty": "HARD", "category": "Bio"},
                {"term": "", "definition": "nameless"},
                {"term": "Diffusion", "difficulty": "impossible"},
                "junk",
            ]
        },
    )
    concepts = asyncio.run(concept_extractor.extract_concepts("x" * 10_000))

    assert [c.term for c in concepts] == ["Osmosis", "Diffusion"]
    assert concepts[0].difficulty is Difficulty.HARD
    assert concepts[1].difficulty is Difficulty.MEDIUM
    assert concepts[0].id != "1" and concepts[0].id.startswith("concept-")
    assert len(concepts[0].id) > 0 and concepts[0].id != concepts[1].id
    assert "x" * concept_extractor.MAX_INPUT_CHARS in calls[0]
    assert "x" * (concept_extractor.MAX_INPUT_CHARS + 1) not in calls[0]


def test_generate_flashcards_drops_blank_cards(monkeypatch: pytest.MonkeyPatch):
    calls = stub_llm(
        monkeypatch,
        flashcard_generator,
        {
            "flashcards": [
                {"question": "What is osmosis?", "answer": "Water diffusion", "difficulty": "easy"},
                {"question": "  ", "answer": "orphan"},
                {"question": "Compare osmosis and diffusion", "answer": "Both move down gradients"},
            ]
        },
    )
    concepts = [Concept(term="Osmosis", definition="Water moves")]
    drafts = asyncio.run(flashcard_generator.generate_flashcards(concepts, "exam on Friday"))

    assert [d.question for d in drafts] == ["What is osmosis?", "Compare osmosis and diffusion"]
    assert drafts[0].difficulty is Difficulty.EASY
    assert drafts[1].difficulty is Difficulty.MEDIUM
    assert "Osmosis: Water moves" in calls[0]
    assert "exam on Friday" in calls[0]


def test_generate_flashcards_without_concepts_skips_llm(monkeypatch: pytest.MonkeyPatch):
    calls = stub_llm(monkeypatch, flashcard_generator, {"flashcards": []})
    assert asyncio.run(flashcard_generator.generate_flashcards([])) == []
    assert calls == []


def test_concept_graph_drops_dangling_edges(monkeypatch: pytest.MonkeyPatch):
    stub_llm(
        monkeypatch,
        concept_graph,
        {
            "nodes": [
                {"id": "c1", "label": "Cell", "level": 0},
                {"id": "c2", "label": "Mitochondria", "level": "1"},
                {"id": "c1", "label": "Duplicate"},
            ],
            "edges": [
                {"from": "c2", "to": "c1", "relationship": "is-part-of"},
                {"from": "c2", "to": "ghost", "relationship": "depends-on"},
                {"from": "c1", "to": "c2", "relationship": "loves"},
            ],
        },
    )
    graph = asyncio.run(
        concept_graph.build_concept_graph([Concept(id="c1", term="Cell"), Concept(id="c2", term="Mito")])
    )

    assert [(n.id, n.level) for n in graph.nodes] == [("c1", 0), ("c2", 1)]
    assert [(e.source, e.target, e.relationship) for e in graph.edges] == [
        ("c2", "c1", RelationshipType.IS_PART_OF),
        ("c1", "c2", RelationshipType.RELATES_TO),
    ]
