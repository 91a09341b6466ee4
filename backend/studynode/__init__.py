from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studynode.config import settings
from studynode.db import init_all_databases


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_all_databases(settings.studynode_data_dir)
    yield


def create_app() -> FastAPI:
    application = FastAPI(
        title="StudyNode Backend", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from studynode.routers import graph, health, notes, quiz, study

    application.include_router(health.router)
    application.include_router(notes.router, prefix="/notes", tags=["notes"])
    application.include_router(quiz.router, prefix="/quiz", tags=["quiz"])
    application.include_router(graph.router, prefix="/graph", tags=["graph"])
    application.include_router(study.router, tags=["study"])

    return application


app = create_app()
