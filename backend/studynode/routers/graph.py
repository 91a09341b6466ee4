import asyncio
import logging

from fastapi import APIRouter

from studynode.models.graph import (
    ConceptGraphRequest,
    ConceptGraphResponse,
    LayoutRequest,
    NodePosition,
)
from studynode.routers import llm_http_error
from studynode.services.concept_graph import build_concept_graph
from studynode.services.graph_layout import layout_graph
from studynode.services.llm_service import LLMError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/concepts", response_model=ConceptGraphResponse)
async def concept_graph(body: ConceptGraphRequest) -> ConceptGraphResponse:
    """Build a concept graph with the LLM and lay it out for display."""
    try:
        graph = await build_concept_graph(body.concepts)
    except LLMError as e:
        logger.warning("Concept graph generation failed: %s", e)
        raise llm_http_error(e) from e

    positions = await asyncio.to_thread(
        layout_graph, graph.nodes, graph.edges, body.width, body.height
    )
    return ConceptGraphResponse(nodes=graph.nodes, edges=graph.edges, positions=positions)


@router.post("/layout", response_model=list[NodePosition])
async def layout(body: LayoutRequest) -> list[NodePosition]:
    """Lay out a caller-supplied graph."""
    return await asyncio.to_thread(
        layout_graph,
        body.nodes,
        body.edges,
        body.width,
        body.height,
        body.iterations,
        body.seed,
    )
