"""Celery application configuration for background tasks."""

from celery import Celery
from celery.signals import setup_logging

from socialhub.settings import get_settings

settings = get_settings()

celery_app = Celery(
    "socialhub",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "socialhub.infrastructure.tasks.email_tasks",
        "socialhub.infrastructure.tasks.maintenance_tasks",
    ],
)

celery_app.conf.update(
    task_routes={
        "socialhub.infrastructure.tasks.email_tasks.*": {"queue": "email"},
        "socialhub.infrastructure.tasks.maintenance_tasks.*": {"queue": "maintenance"},
    },

    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    task_always_eager=settings.celery_task_always_eager,
    task_eager_propagates=True,

    worker_prefetch_multiplier=1,
    task_acks_late=True,
    worker_max_tasks_per_child=1000,

    result_expires=3600,  # 1 hour

    task_default_retry_delay=60,  # 1 minute
    task_max_retries=3,

    beat_schedule={
        "cleanup-expired-reset-tokens": {
            "task": "socialhub.infrastructure.tasks.maintenance_tasks.cleanup_expired_reset_tokens",
            "schedule": 3600.0,  # Every hour
        },
        "cleanup-expired-stories": {
            "task": "socialhub.infrastructure.tasks.maintenance_tasks.cleanup_expired_stories",
            "schedule": 3600.0,
        },
    },
)


@setup_logging.connect
def config_loggers(*args, **kwargs):
    """Configure Celery logging."""
    from socialhub.utils.logging import setup_logging as setup_app_logging

    setup_app_logging()
