"""
Celery configuration for the marketplace back-office.

Celery runs the side effects that must never block a request:
- Outbound email (toolkit.tasks.send_email_task)
- Webhook event processing (payments.tasks.process_webhook_event)
- On-demand payout aggregation and processing (payments.tasks)

No beat schedule is configured here. Periodic aggregation is triggered by an
external scheduler calling payments.tasks.aggregate_payouts_task.

Usage:
    from payments.tasks import process_payout_task

    process_payout_task.delay(payout_id)

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
