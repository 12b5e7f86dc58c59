"""Locale upload, job progress and archive download routes."""

from __future__ import annotations

import io
import time
from typing import List, Optional

from flask import Blueprint, current_app, jsonify, request, send_file

import locale_translator.language_codes as lc
from locale_translator.config import ARCHIVE_NAME
from locale_translator.exceptions import ConfigurationError, ExportFailure, LocaleKeyError, ParseError
from locale_translator.export import build_archive
from locale_translator.logger import get_logger
from locale_translator.translation.manager import TranslationManager
from locale_translator.translation.utils import flatten_json, parse_locale_document
from locale_translator.web.tasks import create_translation_job, get_job

locales_bp = Blueprint("locales", __name__)
logger = get_logger(__name__)


def _requested_languages() -> Optional[List[str]]:
    raw = request.args.get("languages") or request.form.get("languages")
    if not raw:
        return None
    languages = []
    for code in raw.split(","):
        code = code.strip()
        if code and code not in languages:
            languages.append(code)
    return languages or None


def _read_upload() -> tuple:
    """Return (filename, text) from a multipart upload or a raw body."""
    upload = request.files.get("file")
    if upload is not None:
        content = upload.read()
        filename = upload.filename or ""
    else:
        content = request.get_data()
        filename = ""
    try:
        return filename, content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError("Locale file must be UTF-8 encoded.", details={"reason": str(e)})


def _build_manager() -> TranslationManager:
    settings = current_app.config["SETTINGS"]
    client = current_app.config.get("TRANSLATION_CLIENT")
    kwargs = {}
    if client is None and current_app.config.get("HTTP_TRANSPORT") is not None:
        kwargs["transport"] = current_app.config["HTTP_TRANSPORT"]
    return TranslationManager.from_settings(
        settings,
        client=client,
        sleep=current_app.config.get("SLEEP", time.sleep),
        **kwargs,
    )


@locales_bp.post("/translate")
def start_translation():
    """Upload a locale file and start a translation job."""
    languages = _requested_languages()
    if languages:
        unknown = [code for code in languages if not lc.is_supported_language(code)]
        if unknown:
            return jsonify({"error": f"Unsupported languages: {', '.join(unknown)}", "code": "unsupported_language"}), 400

    try:
        filename, text = _read_upload()
        document = parse_locale_document(text)
        flatten_json(document)
    except (ParseError, LocaleKeyError) as e:
        logger.warning("Rejected upload: %s", e)
        return jsonify(e.to_dict()), 400

    try:
        manager = _build_manager()
    except ConfigurationError as e:
        logger.warning("Translation configuration invalid: %s", e)
        return jsonify(e.to_dict()), 400

    job = create_translation_job(
        manager,
        document,
        filename=filename,
        languages=languages,
        background=current_app.config.get("RUN_JOBS_IN_BACKGROUND", True),
    )
    return jsonify({"job_id": job.job_id, "job": job.to_dict()}), 202


@locales_bp.get("/jobs/<job_id>")
def get_translation_job(job_id: str):
    """Return status, progress and per-language errors for a job."""
    job = get_job(job_id)
    if not job:
        return jsonify({"error": "Job not found or expired", "code": "job_not_found"}), 404
    return jsonify(job.to_dict())


@locales_bp.get("/jobs/<job_id>/archive")
def download_archive(job_id: str):
    """Download one <code>.json per translated language as a zip archive."""
    job = get_job(job_id)
    if not job:
        return jsonify({"error": "Job not found or expired", "code": "job_not_found"}), 404
    if not job.is_finished:
        return jsonify({"error": "Translation is still running", "code": "job_running"}), 409
    if job.state == "failed":
        return jsonify({"error": job.error or "Translation failed", "code": "job_failed"}), 409

    try:
        content = build_archive(job.translations)
    except ExportFailure as e:
        logger.error("Export failed for job %s: %s", job_id, e)
        return jsonify(e.to_dict()), 500

    return send_file(
        io.BytesIO(content),
        mimetype="application/zip",
        as_attachment=True,
        download_name=ARCHIVE_NAME,
    )
