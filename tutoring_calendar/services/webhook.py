# tutoring_calendar/services/webhook.py
"""
Booking dispatcher: forwards confirmed bookings to an automation webhook.

Best effort only:
- no URL configured → success without any network call
- otherwise a single POST; no retry, no backoff, no queue
- datetimes are sent in UTC (ISO 8601 with a Z suffix)
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from ..schemas.booking import BookingData, WebhookPayload, WebhookResponse

logger = logging.getLogger(__name__)


def to_utc(value: datetime) -> datetime:
    """UTC-aware copy; naive values are taken as server local time."""
    return value.astimezone(timezone.utc)


class WebhookService:
    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client

    @staticmethod
    def create_booking_data(data: BookingData, now: Optional[datetime] = None) -> WebhookPayload:
        """Flatten booking data into the webhook payload."""
        return WebhookPayload(
            reservation_id=data.reservation_id,
            student_name=data.student_name,
            parent_name=data.parent_name,
            email=data.email,
            phone=data.phone,
            subject=data.subject.name,
            subject_icon=data.subject.icon,
            level=data.level.name,
            level_description=data.level.description,
            start_time=to_utc(data.start_time),
            end_time=to_utc(data.end_time),
            note=data.note,
            status=data.status,
            timestamp=to_utc(now or datetime.now(timezone.utc)),
        )

    async def send_booking_data(self, payload: WebhookPayload) -> WebhookResponse:
        if not self.url:
            logger.warning("WEBHOOK_URL is not configured, booking data will not be sent")
            return WebhookResponse(success=True)

        body = payload.model_dump(mode="json", by_alias=True, exclude_none=True)

        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=body, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    response = await client.post(self.url, json=body, timeout=self.timeout)
            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            logger.error(
                f"Webhook rejected booking {payload.reservation_id}: "
                f"HTTP {e.response.status_code}"
            )
            return WebhookResponse(success=False, error=f"HTTP error! status: {e.response.status_code}")

        except httpx.HTTPError as e:
            logger.error(f"Webhook network error for booking {payload.reservation_id}: {e}")
            return WebhookResponse(success=False, error=f"Network error: {e}")

        logger.info(f"Booking {payload.reservation_id} sent to webhook")
        return WebhookResponse(success=True)
