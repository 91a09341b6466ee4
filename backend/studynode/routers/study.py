"""
Study planning and doubt resolution.

Endpoints:
  POST /plan   — day-by-day study plan for a set of topics
  POST /doubt  — answer a study question (or casual chat) with the LLM
"""
import logging

from fastapi import APIRouter

from studynode.models.study import DoubtAnswer, DoubtRequest, StudyPlan, StudyPlanRequest
from studynode.routers import llm_http_error
from studynode.services.doubt_resolver import resolve_doubt
from studynode.services.llm_service import LLMError
from studynode.services.study_planner import create_study_plan

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/plan", response_model=StudyPlan)
async def plan(body: StudyPlanRequest):
    try:
        return await create_study_plan(
            body.topics, body.time_per_day, body.days_until_exam, body.weak_topics
        )
    except LLMError as e:
        logger.warning("Study plan generation failed: %s", e)
        raise llm_http_error(e) from e


@router.post("/doubt", response_model=DoubtAnswer)
async def doubt(body: DoubtRequest):
    try:
        return await resolve_doubt(body.doubt, body.context)
    except LLMError as e:
        logger.warning("Doubt resolution failed: %s", e)
        raise llm_http_error(e) from e
