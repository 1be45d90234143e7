import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from config import settings
from models import SearchOutcome, SearchParameters, utcnow

engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=settings.database_url.startswith("postgresql"),
)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


class SearchJob(Base):
    """One search request submitted through the HTTP API."""
    __tablename__ = "search_jobs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    query: Mapped[str] = mapped_column(String, nullable=False)
    params: Mapped[dict] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(String, default="pending")  # pending | running | complete | error
    total_results: Mapped[int] = mapped_column(Integer, default=0)
    results: Mapped[list] = mapped_column(JSON, default=list)
    search_time: Mapped[float | None] = mapped_column(nullable=True)
    error: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def to_dict(self) -> dict:
        return {
            "job_id": self.id,
            "query": self.query,
            "params": self.params,
            "status": self.status,
            "total_results": self.total_results,
            "results": self.results,
            "search_time": self.search_time,
            "error": self.error or None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def create_job(db: AsyncSession, params: SearchParameters) -> SearchJob:
    job = SearchJob(query=params.query, params=params.model_dump(mode="json"))
    db.add(job)
    await db.commit()
    await db.refresh(job)
    return job


async def mark_running(job_id: str) -> None:
    async with AsyncSessionLocal() as db:
        job = await db.get(SearchJob, job_id)
        job.status = "running"
        await db.commit()


async def finish_job(job_id: str, outcome: SearchOutcome | None, error: str = "") -> None:
    """Persist a finished search; a missing outcome marks the job as failed."""
    async with AsyncSessionLocal() as db:
        job = await db.get(SearchJob, job_id)
        if outcome is None:
            job.status = "error"
            job.error = error or "Search failed."
        else:
            job.status = "complete"
            job.total_results = outcome.total_results
            job.results = [r.model_dump(mode="json") for r in outcome.results]
            job.search_time = outcome.search_time
        job.completed_at = utcnow()
        await db.commit()
