from supabase import Client
from hockey_cms.config import settings
from hockey_cms.core.content_types import BULK_GENERATION_TYPES, normalize_content_type
from hockey_cms.core.responses import database_error
from hockey_cms.core.status import utc_now_iso
from hockey_cms.modules.content_save.service import ContentSaveService
from hockey_cms.modules.generation.gemini_client import GeminiClient
from hockey_cms.modules.generation.service import GenerationService
from hockey_cms.modules.generation_jobs.schemas import ACTIVE_JOB_STATUSES, JobStatus
from hockey_cms.modules.prompts.service import PromptService
from hockey_cms.modules.source_content.schemas import IngestStatus
from hockey_cms.modules.source_content.service import SourceContentService
from typing import List, Optional, Dict, Any, Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class JobError(Exception):
    """A job that cannot be completed; the message is stored on the job row"""


class JobFailed(HTTPException):
    """Raised by process_next_job after a claimed job failed and was recorded"""

    def __init__(self, job_id: int, message: str):
        super().__init__(status_code=500, detail=message)
        self.job_id = job_id


class GenerationJobService:
    def __init__(
        self,
        supabase: Client,
        generation: GenerationService,
        prompts: PromptService,
        saver: ContentSaveService,
        sources: SourceContentService,
    ):
        self.supabase = supabase
        self.generation = generation
        self.prompts = prompts
        self.saver = saver
        self.sources = sources

    @property
    def jobs(self):
        return self.supabase.table("generation_jobs")

    # Queue management

    def start_bulk_generation(self, source_content_id: int) -> List[Dict[str, Any]]:
        """Queue one pending job per generatable content type for a source"""
        try:
            source = self.sources.get_source(source_content_id)
        except HTTPException as e:
            if e.status_code == 404:
                raise HTTPException(status_code=404, detail="Ingested content not found")
            raise
        if source.get("status") == IngestStatus.PROCESSING.value:
            raise HTTPException(status_code=409, detail="This content is already being processed.")

        self.sources.set_status(source_content_id, IngestStatus.PROCESSING)
        jobs_to_insert = [
            {
                "source_content_id": source_content_id,
                "content_type": content_type.value,
                "status": JobStatus.PENDING.value,
                "attempts": 0,
            }
            for content_type in BULK_GENERATION_TYPES
        ]
        try:
            result = self.jobs.insert(jobs_to_insert).execute()
        except Exception as e:
            logger.error(f"Failed to insert generation jobs for source {source_content_id}: {e}")
            self.sources.set_status(source_content_id, IngestStatus.FAILED)
            raise HTTPException(status_code=500, detail=f"Failed to create generation jobs: {e}")
        logger.info(f"Queued {len(jobs_to_insert)} generation jobs for source {source_content_id}")
        return result.data or []

    def cancel_bulk_generation(self, source_content_id: int) -> int:
        """Cancel the unfinished jobs of a source and make it ready again"""
        try:
            result = self.jobs.update({"status": JobStatus.CANCELLED.value, "updated_at": utc_now_iso()})\
                .eq("source_content_id", source_content_id)\
                .in_("status", ACTIVE_JOB_STATUSES)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to cancel jobs for source {source_content_id}: {e}")
            raise database_error(e)
        cancelled = len(result.data or [])
        self.sources.set_status(source_content_id, IngestStatus.READY)
        logger.info(f"Cancelled {cancelled} generation job(s) for source {source_content_id}")
        return cancelled

    def list_jobs(
        self,
        source_content_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        try:
            query = self.jobs.select("*", count="exact")
            if source_content_id is not None:
                query = query.eq("source_content_id", source_content_id)
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return result.data or [], result.count or 0
        except Exception as e:
            raise database_error(e)

    # Processing

    def next_pending_job(self) -> Optional[Dict[str, Any]]:
        try:
            result = self.jobs.select("*")\
                .eq("status", JobStatus.PENDING.value)\
                .order("created_at")\
                .limit(1)\
                .execute()
        except Exception as e:
            raise database_error(e)
        return result.data[0] if result.data else None

    def claim_job(self, job: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Move a job from pending to in_progress; None when another runner got there first"""
        try:
            result = self.jobs.update({
                "status": JobStatus.IN_PROGRESS.value,
                "attempts": (job.get("attempts") or 0) + 1,
                "started_at": utc_now_iso(),
                "updated_at": utc_now_iso(),
            }).eq("id", job["id"]).eq("status", JobStatus.PENDING.value).execute()
        except Exception as e:
            raise database_error(e)
        return result.data[0] if result.data else None

    def _update_job(self, job_id: int, update_data: Dict[str, Any]) -> None:
        update_data["updated_at"] = utc_now_iso()
        self.jobs.update(update_data).eq("id", job_id).execute()

    def _mark_failed(self, job_id: int, message: str) -> None:
        try:
            self._update_job(job_id, {"status": JobStatus.FAILED.value, "error_message": message})
        except Exception as e:
            logger.error(f"Could not mark job {job_id} as failed: {e}")

    def finalize_source(self, source_content_id: int) -> Optional[str]:
        """
        Close out a source once none of its jobs are pending or in progress.

        The source becomes ``completed`` when at least one job completed and
        ``failed`` otherwise. Returns the new status, or None while jobs remain.
        """
        try:
            remaining = self.jobs.select("id", count="exact")\
                .eq("source_content_id", source_content_id)\
                .in_("status", ACTIVE_JOB_STATUSES)\
                .execute()
            if remaining.count:
                return None
            completed = self.jobs.select("id", count="exact")\
                .eq("source_content_id", source_content_id)\
                .eq("status", JobStatus.COMPLETED.value)\
                .execute()
            status = IngestStatus.COMPLETED if completed.count else IngestStatus.FAILED
            self.sources.set_status(source_content_id, status)
            logger.info(f"Source {source_content_id} finished bulk generation: {status.value}")
            return status.value
        except Exception as e:
            logger.warning(f"Could not finalize source {source_content_id}: {e}")
            return None

    def _run_job(self, job: Dict[str, Any]) -> int:
        if job["attempts"] > settings.job_max_attempts:
            raise JobError(f"Job exceeded the maximum of {settings.job_max_attempts} attempts")
        try:
            content_type = normalize_content_type(job["content_type"])
        except ValueError:
            raise JobError(f"Unsupported content type: {job['content_type']}")

        source = self.sources.get_source(job["source_content_id"])
        text = source.get("processed_text") or source.get("content_text")
        if not text:
            raise JobError("Job is missing source content.")

        prompt = self.prompts.find_active_prompt(content_type)
        if not prompt:
            raise JobError(f"No active prompt found for content type: {content_type.value}")

        items = self.generation.generate_items(content_type, text, prompt["prompt_content"])
        if not items:
            raise JobError("Content generation returned no items")
        saved = self.saver.save_generated(content_type, items, source_content_id=source["id"])
        return saved["count"]

    def process_next_job(self) -> Dict[str, Any]:
        """Claim and run the oldest pending job. Raises JobFailed (a 500) when the job fails."""
        job = self.next_pending_job()
        if not job:
            return {"processed": False, "message": "No pending jobs to process."}
        claimed = self.claim_job(job)
        if not claimed:
            logger.info(f"Job {job['id']} was claimed by another runner")
            return {"processed": False, "message": f"Job {job['id']} is already being processed."}

        logger.info(f"Processing job {claimed['id']} ({claimed['content_type']}) attempt {claimed['attempts']}")
        try:
            saved_count = self._run_job(claimed)
        except Exception as e:
            message = e.detail if isinstance(e, HTTPException) else str(e)
            logger.error(f"Job {claimed['id']} failed: {message}")
            self._mark_failed(claimed["id"], message)
            self.finalize_source(claimed["source_content_id"])
            raise JobFailed(claimed["id"], message)

        self._update_job(claimed["id"], {
            "status": JobStatus.COMPLETED.value,
            "completed_at": utc_now_iso(),
            "error_message": None,
        })
        self.finalize_source(claimed["source_content_id"])
        return {
            "processed": True,
            "jobId": claimed["id"],
            "contentType": claimed["content_type"],
            "savedCount": saved_count,
            "message": f"Job {claimed['id']} processed successfully.",
        }


def build_job_service(supabase: Client, gemini: GeminiClient) -> GenerationJobService:
    return GenerationJobService(
        supabase,
        GenerationService(gemini),
        PromptService(supabase),
        ContentSaveService(supabase),
        SourceContentService(supabase),
    )
