"""
Deletes accounts whose deletion was scheduled when they were deactivated.

Usage:
    # Process due jobs once
    python -m inkwell.workers.delete_account

    # Keep polling every 60 seconds
    python -m inkwell.workers.delete_account --loop --interval 60
"""
import argparse

import anyio
import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inkwell.core.database import AsyncSessionLocal
from inkwell.core.logging import configure_logging
from inkwell.models import User
from inkwell.services import accounts
from inkwell.services.jobs import USER_DELETION_QUEUE, JobQueue

logger = structlog.get_logger(__name__)


async def delete_account(session: AsyncSession, user_id: int) -> bool:
    """
    Deletes the user and, through cascades, all its content.

    Safe to run more than once: users that are gone or were reactivated in
    the meantime are left alone. Returns whether something was deleted.
    """
    user = await session.get(User, user_id)
    if user is None or user.deactivated_at is None:
        return False
    await accounts.delete_user(session, user)
    return True


async def run_due_jobs(session_factory: async_sessionmaker = AsyncSessionLocal) -> int:
    """Processes every due deletion job. Returns how many accounts were deleted."""
    deleted = 0
    async with session_factory() as session:
        jobs = await JobQueue.due(session, USER_DELETION_QUEUE)

    for job in jobs:
        user_id = job.payload["user_id"]
        async with session_factory() as session:
            session.add(job)
            job.attempts += 1
            await session.commit()
            try:
                if await delete_account(session, user_id):
                    deleted += 1
                    logger.info("account_deleted", user_id=user_id, job_id=job.id)
                else:
                    logger.info("account_deletion_skipped", user_id=user_id, job_id=job.id)
            except Exception:
                await session.rollback()
                logger.exception("account_deletion_failed", user_id=user_id, job_id=job.id)
                continue
            JobQueue.complete(job)
            await session.commit()

    return deleted


async def main(loop: bool, interval: int) -> None:
    configure_logging()
    while True:
        await run_due_jobs()
        if not loop:
            return
        await anyio.sleep(interval)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Account deletion worker")
    parser.add_argument("--loop", action="store_true", help="Keep polling for due jobs")
    parser.add_argument("--interval", type=int, default=60, help="Seconds between polls")
    cli_args, _ = parser.parse_known_args()
    anyio.run(main, cli_args.loop, cli_args.interval)
