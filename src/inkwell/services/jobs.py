"""
Database-backed job queue.

Jobs are rows in ``scheduled_jobs`` so that enqueueing can share a
transaction with the change that caused it. Delivery is at-least-once:
a job whose consumer crashes before ``complete`` is handed out again.
"""
from datetime import timedelta

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models import ScheduledJob, utcnow

logger = structlog.get_logger(__name__)

USER_DELETION_QUEUE = "user_deletion"


class JobQueue:
    """
    Queue operations over ``scheduled_jobs``.

    Example:
        job = await JobQueue.enqueue_in(session, "user_deletion", 3600, {"user_id": 1})
        await session.commit()
    """

    @staticmethod
    async def enqueue_in(
        session: AsyncSession, queue: str, seconds: int, payload: dict
    ) -> ScheduledJob:
        """Add a job due ``seconds`` from now. The caller owns the commit."""
        job = ScheduledJob(
            queue=queue,
            payload=payload,
            run_at=utcnow() + timedelta(seconds=seconds),
        )
        session.add(job)
        await session.flush()
        logger.info("job_enqueued", queue=queue, job_id=job.id, run_at=job.run_at.isoformat())
        return job

    @staticmethod
    async def due(session: AsyncSession, queue: str, limit: int = 100) -> list[ScheduledJob]:
        """Jobs of ``queue`` whose time has come and that are not completed yet."""
        stmt = (
            select(ScheduledJob)
            .where(ScheduledJob.queue == queue)
            .where(ScheduledJob.completed_at.is_(None))
            .where(ScheduledJob.run_at <= utcnow())
            .order_by(ScheduledJob.run_at, ScheduledJob.id)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def pending(session: AsyncSession, queue: str) -> list[ScheduledJob]:
        stmt = (
            select(ScheduledJob)
            .where(ScheduledJob.queue == queue)
            .where(ScheduledJob.completed_at.is_(None))
            .order_by(ScheduledJob.id)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def complete(job: ScheduledJob) -> None:
        job.completed_at = utcnow()
