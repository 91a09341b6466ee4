from fastapi import HTTPException

from studynode.services.llm_service import LLMError, LLMUnavailableError


def llm_http_error(exc: LLMError) -> HTTPException:
    """Map an LLM failure onto the HTTP status the client should see."""
    if isinstance(exc, LLMUnavailableError):
        return HTTPException(status_code=503, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))
