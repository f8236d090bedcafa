import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("hall_booking")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Abandoned checkout sessions fall back to draft - every 5 minutes
    "release-stale-payment-sessions": {
        "task": "bookings.release_stale_payment_sessions",
        "schedule": crontab(minute="*/5"),
        "options": {"expires": 240},
    },
}

app.conf.timezone = "Africa/Johannesburg"
