from contextlib import asynccontextmanager
from typing import Literal

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from agents.formatter import build_formatter
from agents.orchestrator import SearchWorkflow
from config import settings
from database import SearchJob, create_job, engine, finish_job, get_db, init_db, mark_running
from logging_setup import setup_logging
from models import SearchParameters, TrademarkStatus

# Chosen once per process from the API key
formatter = build_formatter(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    await init_db()
    yield
    await engine.dispose()


app = FastAPI(title="WIPO Brand Search", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class SearchRequest(BaseModel):
    query: str
    search_type: Literal["brand", "owner", "number"] = "brand"
    country: str | None = None
    nice: str | None = None
    status: TrademarkStatus | None = None
    limit: int = 10


class SearchResponse(BaseModel):
    job_id: str
    status: str


@app.post("/api/search", response_model=SearchResponse)
async def create_search(
    req: SearchRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    try:
        params = SearchParameters(**req.model_dump())
    except ValidationError as exc:
        raise HTTPException(400, exc.errors(include_url=False, include_context=False))

    job = await create_job(db, params)
    background_tasks.add_task(_run_job, job.id, params)
    return SearchResponse(job_id=job.id, status=job.status)


async def _run_job(job_id: str, params: SearchParameters) -> None:
    await mark_running(job_id)
    try:
        outcome = await SearchWorkflow(settings, formatter=formatter).run(params)
    except Exception as exc:
        await finish_job(job_id, None, error=f"{type(exc).__name__}: {exc}")
        return
    await finish_job(job_id, outcome)


@app.get("/api/jobs/{job_id}")
async def get_job(job_id: str, db: AsyncSession = Depends(get_db)):
    job = await db.get(SearchJob, job_id)
    if not job:
        raise HTTPException(404, "Job not found")
    return job.to_dict()


@app.get("/api/config")
async def get_config():
    return settings.summary()
