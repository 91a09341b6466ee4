from enum import Enum

from pydantic import BaseModel, Field

from studynode.models.flashcard import Concept

# Layout is O(nodes^2 * iterations)
MAX_LAYOUT_NODES = 200
MAX_LAYOUT_EDGES = 2000


class RelationshipType(str, Enum):
    DEPENDS_ON = "depends-on"
    RELATES_TO = "relates-to"
    IS_PART_OF = "is-part-of"
    LEADS_TO = "leads-to"
    CONTRASTS_WITH = "contrasts-with"


class GraphNode(BaseModel):
    id: str
    label: str
    level: int = 0  # 0 = foundational


class GraphEdge(BaseModel):
    # "from" is a keyword, so the wire name is kept through an alias
    source: str = Field(alias="from")
    target: str = Field(alias="to")
    relationship: RelationshipType = RelationshipType.RELATES_TO

    model_config = {"populate_by_name": True}


class NodePosition(BaseModel):
    id: str
    x: float
    y: float


class ConceptGraphRequest(BaseModel):
    concepts: list[Concept] = Field(max_length=MAX_LAYOUT_NODES)
    width: float = 800.0
    height: float = 600.0


class LayoutRequest(BaseModel):
    nodes: list[GraphNode] = Field(max_length=MAX_LAYOUT_NODES)
    edges: list[GraphEdge] = Field(default_factory=list, max_length=MAX_LAYOUT_EDGES)
    width: float = 800.0
    height: float = 600.0
    iterations: int = Field(default=300, ge=0, le=5000)
    seed: int | None = None


class ConceptGraphResponse(BaseModel):
    nodes: list[GraphNode]
    edges: list[GraphEdge]
    positions: list[NodePosition]
