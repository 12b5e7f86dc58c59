"""
Asynchronous task helpers for long-running translation runs.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from locale_translator.logger import get_logger
from locale_translator.translation.manager import TranslationManager
from locale_translator.translation.progress import ProgressState

logger = get_logger(__name__)


@dataclass
class JobState:
    """In-memory representation of an asynchronous translation job."""

    job_id: str
    filename: str = ""
    languages: List[str] = field(default_factory=list)
    state: str = "pending"  # pending|running|completed|failed
    created_at: float = field(default_factory=time.time)
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    progress: Dict[str, Any] = field(default_factory=dict)
    result: Optional[Dict[str, Any]] = None
    translations: Dict[str, Dict[str, str]] = field(default_factory=dict)
    error: Optional[str] = None
    last_update: float = field(default_factory=time.time)

    @property
    def is_finished(self) -> bool:
        return self.state in ("completed", "failed")

    def to_dict(self) -> Dict[str, Any]:
        # Translations can be large; they are served by the archive route
        return {
            "job_id": self.job_id,
            "filename": self.filename,
            "languages": list(self.languages),
            "state": self.state,
            "created_at": self.created_at,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "progress": dict(self.progress),
            "result": self.result,
            "error": self.error,
            "last_update": self.last_update,
        }


_jobs: Dict[str, JobState] = {}
_jobs_lock = threading.Lock()
_JOB_RETENTION_SECONDS = 600  # Retain job info for 10 minutes after completion


def create_translation_job(
    manager: TranslationManager,
    document: Dict[str, Any],
    filename: str = "",
    languages: Optional[List[str]] = None,
    background: bool = True,
) -> JobState:
    """
    Create and launch a translation job.

    Args:
        manager: TranslationManager owned by this job only
        document: Parsed locale document
        filename: Uploaded file name, for display
        languages: Optional subset of target languages. None => all.
        background: Run in a daemon thread (False runs inline, used by tests)

    Returns:
        JobState for the new job (already registered)
    """
    job_id = uuid.uuid4().hex
    job_state = JobState(job_id=job_id, filename=filename, languages=languages or [])

    with _jobs_lock:
        _cleanup_jobs_locked()
        _jobs[job_id] = job_state

    if background:
        thread = threading.Thread(
            target=_run_translation_job,
            args=(job_state, manager, document),
            name=f"translation-job-{job_id}",
            daemon=True,
        )
        thread.start()
    else:
        _run_translation_job(job_state, manager, document)

    logger.info(
        "Translation job %s started for %s (languages=%s)",
        job_id,
        filename or "upload",
        job_state.languages or "all",
    )
    return job_state


def get_job(job_id: str) -> Optional[JobState]:
    """Fetch a job by ID; finished jobs are dropped once their archive window passes."""
    with _jobs_lock:
        job = _jobs.get(job_id)
        if job is not None and _is_expired(job, time.time()):
            del _jobs[job_id]
            return None
        return job


def _run_translation_job(job: JobState, manager: TranslationManager, document: Dict[str, Any]):
    """Worker function executed in a background thread."""
    with _jobs_lock:
        job.state = "running"
        job.started_at = time.time()
        job.last_update = job.started_at

    def on_progress(progress: ProgressState):
        with _jobs_lock:
            job.progress = progress.to_dict()
            job.last_update = time.time()

    try:
        result = manager.run(
            document,
            target_languages=job.languages or None,
            progress_callback=on_progress,
        )
        with _jobs_lock:
            job.translations = result.translations
            job.result = result.to_dict()
            job.state = "completed"
            job.finished_at = time.time()
            job.last_update = job.finished_at
        logger.info(
            "Translation job %s finished (languages=%s, failed=%s)",
            job.job_id,
            len(result.translations),
            len(result.errors),
        )
    except Exception as exc:
        error_type = type(exc).__name__
        error_message = str(exc)
        with _jobs_lock:
            job.state = "failed"
            job.error = f"{error_type}: {error_message}"
            job.finished_at = time.time()
            job.last_update = job.finished_at
        logger.exception(
            "✗ Translation job %s failed: %s: %s",
            job.job_id,
            error_type,
            error_message,
        )


def _is_expired(job: JobState, now: float) -> bool:
    return job.finished_at is not None and now - job.finished_at > _JOB_RETENTION_SECONDS


def _cleanup_jobs_locked():
    """Drop expired jobs and their translations (call with _jobs_lock held)."""
    now = time.time()
    for job_id in [job_id for job_id, job in _jobs.items() if _is_expired(job, now)]:
        del _jobs[job_id]
