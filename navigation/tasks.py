# backend/navigation/tasks.py
from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def repair_menu_delete(self, node_id, new_parent_id, old_prefix, new_prefix):
    """
    Re-run the relink step of a menu delete that failed half way.
    MenuTreeService.repair_delete is idempotent, so retries are harmless.
    """
    from .services import get_menu_service

    try:
        written = get_menu_service().repair_delete(
            node_id, new_parent_id, old_prefix, new_prefix
        )
        logger.info("Celery: repaired menu delete %s (%d node(s) written)", node_id, written)
        return written
    except Exception as exc:
        logger.exception("Celery: failed to repair menu delete %s: %s", node_id, exc)
        raise self.retry(exc=exc)
