from celery import Celery
from transfer_pricing.core.config import settings

celery_app = Celery(
    "worker",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_BACKEND,
)
celery_app.conf.task_routes = {
    "transfer_pricing.services.tasks.increment_rule_usage": {"queue": "rule_usage"}
}

@celery_app.task(bind=True, max_retries=3, ignore_result=True)
def increment_rule_usage(self, rule_id: str):
    import asyncio
    from transfer_pricing.services.tasks_internal import increment_rule_usage_async

    try:
        asyncio.run(increment_rule_usage_async(rule_id))
    except Exception as e:
        retry_kwargs = {"countdown": 2 ** self.request.retries}
        raise self.retry(exc=e, **retry_kwargs)
