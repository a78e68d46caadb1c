import os

from celery import Celery

_redis = f"redis://{os.environ.get('REDIS_HOST', 'redis')}:{os.environ.get('REDIS_PORT', '6379')}"

celery_app = Celery(
    "family_hub_worker",
    broker=f"{_redis}/0",
    backend=f"{_redis}/1",
    include=["worker.tasks"],
)

celery_app.conf.beat_schedule = {
    "hourly-chat-purge": {
        "task": "worker.tasks.purge_expired_chats",
        "schedule": float(os.environ.get("CHAT_PURGE_INTERVAL_SECONDS", "3600")),
    },
}
celery_app.conf.timezone = "UTC"
