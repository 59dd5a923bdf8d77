import asyncio
import logging
from hockey_cms.config import settings
from hockey_cms.database.supabase_client import get_service_supabase
from hockey_cms.modules.generation.gemini_client import get_gemini_client
from hockey_cms.modules.generation_jobs.service import JobFailed, build_job_service

logger = logging.getLogger(__name__)


async def drain_pending_jobs() -> int:
    """
    Process pending jobs until the queue is empty. Returns how many were processed.

    A failed job is already recorded on its row, so draining moves on to the
    next one. Any other error (e.g. the database is unreachable) propagates to
    the caller.
    """
    service = build_job_service(get_service_supabase(), get_gemini_client())
    processed = 0
    while True:
        try:
            result = await asyncio.to_thread(service.process_next_job)
        except JobFailed as e:
            logger.error(f"Generation job {e.job_id} failed: {e.detail}")
            processed += 1
            await asyncio.sleep(settings.job_delay_seconds)
            continue
        if not result["processed"]:
            return processed
        processed += 1
        await asyncio.sleep(settings.job_delay_seconds)


async def job_worker_loop():
    """Background task that periodically drains the generation job queue"""
    while True:
        try:
            processed = await drain_pending_jobs()
            if processed:
                logger.info(f"Job worker processed {processed} job(s)")
        except Exception as e:
            logger.error(f"Error in job worker loop: {str(e)}")

        await asyncio.sleep(settings.job_worker_interval_seconds)
