from studynode.models.flashcard import (
    Concept,
    ConceptList,
    Difficulty,
    DueCards,
    Flashcard,
    FlashcardDraft,
    FlashcardList,
    FlashcardUpdate,
    GenerateFlashcardsRequest,
    RetentionReportOut,
    ReviewRequest,
    ReviewResult,
)
from studynode.models.graph import (
    ConceptGraphRequest,
    ConceptGraphResponse,
    GraphEdge,
    GraphNode,
    LayoutRequest,
    NodePosition,
    RelationshipType,
)
from studynode.models.note import Note, NoteCreate, NoteList, NoteUpdate, SourceType
from studynode.models.study import (
    AnswerValidation,
    AnswerValidationRequest,
    DoubtAnswer,
    DoubtRequest,
    GenerateQuestionsRequest,
    Priority,
    Question,
    QuestionList,
    QuestionType,
    StudyPlan,
    StudyPlanRequest,
    StudyTask,
    Summary,
)

__all__ = [
    "AnswerValidation",
    "AnswerValidationRequest",
    "Concept",
    "ConceptGraphRequest",
    "ConceptGraphResponse",
    "ConceptList",
    "Difficulty",
    "DoubtAnswer",
    "DoubtRequest",
    "DueCards",
    "Flashcard",
    "FlashcardDraft",
    "FlashcardList",
    "FlashcardUpdate",
    "GenerateFlashcardsRequest",
    "GenerateQuestionsRequest",
    "GraphEdge",
    "GraphNode",
    "LayoutRequest",
    "Note",
    "NoteCreate",
    "NoteList",
    "NoteUpdate",
    "NodePosition",
    "Priority",
    "Question",
    "QuestionList",
    "QuestionType",
    "RelationshipType",
    "RetentionReportOut",
    "ReviewRequest",
    "ReviewResult",
    "SourceType",
    "StudyPlan",
    "StudyPlanRequest",
    "StudyTask",
    "Summary",
]
