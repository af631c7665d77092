"""Celery application configuration."""

from celery import Celery
from celery.schedules import crontab

from src.config import get_settings

settings = get_settings()

app = Celery(
    "invensync",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["src.tasks.expiry"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,  # 4 minutes soft limit
)

# Decay runs shortly after each day boundary so alerts see current-day status
app.conf.beat_schedule = {
    "decay-all-inventories": {
        "task": "src.tasks.expiry.decay_all_inventories",
        "schedule": crontab(hour=0, minute=5),
    },
}
