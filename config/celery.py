# backend/config/celery.py
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.base")

app = Celery("config")
app.config_from_object("django.conf:settings", namespace="CELERY")

broker = os.getenv("CELERY_BROKER_URL")

if not broker:
    # Run tasks locally if no broker configured
    app.conf.task_always_eager = True
    app.conf.task_store_eager_result = False

app.autodiscover_tasks()
