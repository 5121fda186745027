import httpx
from snackdash.core.config import settings
from snackdash.core.logging import get_logger

logger = get_logger(__name__)


class OrderNotifier:
    @staticmethod
    async def dispatch(tenant_id: str, order_id: str, whatsapp_number: str, text: str) -> bool:
        """
        Hands the order summary to the messaging webhook.
        Best-effort: failures are logged, the stored order is never touched.
        """
        if not settings.NOTIFY_WEBHOOK_URL:
            logger.debug("NOTIFY_WEBHOOK_URL not set. Skipping hand-off.")
            return False

        headers = {"Content-Type": "application/json"}
        if settings.NOTIFY_API_KEY:
            headers["Authorization"] = f"Bearer {settings.NOTIFY_API_KEY}"
        payload = {
            "tenant_id": tenant_id,
            "order_id": order_id,
            "whatsapp_number": whatsapp_number,
            "text": text,
        }
        log_extra = {"tenant_id": tenant_id, "order_id": order_id}

        async with httpx.AsyncClient() as client:
            for attempt in range(2):  # Simple retry for transient timeouts
                try:
                    response = await client.post(
                        settings.NOTIFY_WEBHOOK_URL,
                        json=payload,
                        headers=headers,
                        timeout=settings.NOTIFY_TIMEOUT_SECONDS,
                    )
                    if response.is_error:
                        logger.error(f"Order hand-off failed (Attempt {attempt+1}) with status {response.status_code}. Response: {response.text}", extra=log_extra)
                        response.raise_for_status()

                    logger.info(f"Order handed off (Attempt {attempt+1}).", extra=log_extra)
                    return True
                except httpx.TimeoutException:
                    if attempt == 0:
                        logger.warning("Timeout during order hand-off (Attempt 1). Retrying...", extra=log_extra)
                        continue
                    logger.error("Timeout during order hand-off (Attempt 2). Giving up.", extra=log_extra)
                except httpx.HTTPStatusError as e:
                    logger.error(f"HTTPStatusError during order hand-off: {e.response.status_code}", extra=log_extra)
                    break  # Don't retry auth/config errors
                except httpx.HTTPError:
                    logger.exception("Unexpected error during order hand-off", extra=log_extra)
                    break
        return False
