import logging
import os

import httpx

from worker.celery_app import celery_app

logger = logging.getLogger(__name__)


def _api_base() -> str:
    return os.environ.get("FAMILY_HUB_API_BASE_URL", "http://api:8000/v1").rstrip("/")


@celery_app.task
def purge_expired_chats():
    """Ask the API to hard-delete chat messages past their expiry."""
    token = os.environ.get("INTERNAL_ADMIN_TOKEN", "")
    if not token:
        return {"job": "chat_purge", "status": "skipped", "reason": "missing INTERNAL_ADMIN_TOKEN"}

    url = f"{_api_base()}/admin/chat/purge-expired"
    try:
        resp = httpx.post(url, headers={"X-Internal-Admin-Token": token}, timeout=60.0)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("chat purge failed: %s", exc)
        return {"job": "chat_purge", "status": "error", "error": str(exc)}

    deleted = resp.json().get("deleted", 0)
    logger.info("chat purge removed %s messages", deleted)
    return {"job": "chat_purge", "status": "ok", "deleted": deleted}
