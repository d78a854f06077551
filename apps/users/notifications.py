"""
Outbound notifications.

One notifier is built at process start (see ``MatchingConfig.ready``)
and handed to whoever needs it. Delivery is best effort: failures are
logged and reported as ``False``, never raised into the caller.
"""

import logging

import requests

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = 'https://api.telegram.org'

REQUEST_TIMEOUT_SECONDS = 5


class NullNotifier:
    """Used when no bot token is configured."""

    def send(self, profile, text):
        logger.debug('Notification for profile #%s dropped: no transport configured', profile.pk)
        return False


class TelegramNotifier:
    """
    Sends plain text messages through the Telegram Bot API.

    Only profiles that carry a ``telegram_id`` can be reached.
    """

    def __init__(self, token, session=None, base_url=TELEGRAM_API_URL):
        self.token = token
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()

    def send(self, profile, text):
        if not profile.telegram_id:
            return False

        url = f'{self.base_url}/bot{self.token}/sendMessage'
        try:
            response = self.session.post(
                url,
                json={'chat_id': profile.telegram_id, 'text': text},
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning('Telegram delivery to profile #%s failed: %s', profile.pk, e)
            return False

        return True


def build_notifier(settings):
    token = getattr(settings, 'TELEGRAM_BOT_TOKEN', '')
    if token:
        return TelegramNotifier(token)
    return NullNotifier()


def send_like_notification(notifier, liker, liked):
    name = liker.display_name or 'Someone'
    return notifier.send(liked, f'{name} liked your profile!')
