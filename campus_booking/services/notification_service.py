import requests
from flask import current_app

BOOKING_CONFIRMED = 'booking.confirmed'
BOOKING_CANCELLED = 'booking.cancelled'


class NotificationService:
    """
    Fire-and-forget delivery of booking events to the notification webhook
    (the mailer lives behind it). Delivery problems are logged and never
    reach the caller.
    """

    def __init__(self, webhook_url=None, timeout=5):
        self.webhook_url = webhook_url
        self.timeout = timeout

    def notify(self, event, booking):
        if not self.webhook_url:
            current_app.logger.info(f"Notifications disabled, skipping {event} for booking {booking.id}.")
            return False

        payload = {
            'event': event,
            'booking': booking.to_dict(),
            'user_id': booking.user_id,
        }
        try:
            response = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            current_app.logger.warning(f"Could not deliver {event} for booking {booking.id}: {e}")
            return False

        current_app.logger.info(f"Sent {event} for booking {booking.id}")
        return True
