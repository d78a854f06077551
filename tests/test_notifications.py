from types import SimpleNamespace
from unittest import mock

import requests

from apps.users.notifications import (
    NullNotifier, TelegramNotifier, build_notifier, send_like_notification,
)


def profile(pk=1, telegram_id=555, display_name='Ann'):
    return SimpleNamespace(pk=pk, telegram_id=telegram_id, display_name=display_name)


def test_build_notifier_depends_on_token():
    assert isinstance(build_notifier(SimpleNamespace(TELEGRAM_BOT_TOKEN='')), NullNotifier)
    notifier = build_notifier(SimpleNamespace(TELEGRAM_BOT_TOKEN='123:abc'))
    assert isinstance(notifier, TelegramNotifier)
    assert notifier.token == '123:abc'


def test_telegram_send_message():
    session = mock.Mock()
    notifier = TelegramNotifier('123:abc', session=session)

    assert notifier.send(profile(), 'hello') is True

    session.post.assert_called_once_with(
        'https://api.telegram.org/bot123:abc/sendMessage',
        json={'chat_id': 555, 'text': 'hello'},
        timeout=5,
    )


def test_telegram_failures_are_reported_not_raised():
    session = mock.Mock()
    session.post.side_effect = requests.ConnectionError('down')
    notifier = TelegramNotifier('t', session=session)

    assert notifier.send(profile(), 'hello') is False


def test_profiles_without_telegram_are_skipped():
    session = mock.Mock()
    notifier = TelegramNotifier('t', session=session)

    assert notifier.send(profile(telegram_id=None), 'hello') is False
    session.post.assert_not_called()


def test_like_message():
    notifier = mock.Mock()
    send_like_notification(notifier, profile(display_name=''), profile(pk=2))
    notifier.send.assert_called_once()
    assert notifier.send.call_args.args[1] == 'Someone liked your profile!'
