import itertools
from datetime import date

import pytest
from rest_framework.test import APIClient

from apps.matching.services import TrustGraph
from apps.users.models import Navigator, Profile

_session_ids = itertools.count(1)


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send(self, profile, text):
        self.sent.append((profile.pk, text))
        return True


def years_ago(years, today=None):
    today = today or date.today()
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # Feb 29
        return today.replace(year=today.year - years, day=28)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_profile(db):
    """
    Create a profile; ``lat``/``lon`` add a Navigator entry.
    """
    def factory(lat=None, lon=None, age=30, **fields):
        fields.setdefault('session_id', f'session-{next(_session_ids)}')
        fields.setdefault('display_name', fields['session_id'])
        fields.setdefault('gender', Profile.GENDER_WOMAN)
        fields.setdefault('birthday', years_ago(age))
        profile = Profile.objects.create(**fields)
        if lat is not None and lon is not None:
            Navigator.objects.create(profile=profile, latitude=lat, longitude=lon)
        return profile
    return factory


@pytest.fixture
def client_for(api_client):
    """API client acting as the given profile via its session id."""
    def factory(profile):
        api_client.credentials(HTTP_X_SESSION_ID=profile.session_id)
        return api_client
    return factory


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def trust_graph(notifier):
    return TrustGraph(notifier, complaint_threshold=1)


@pytest.fixture
def app_trust_graph(monkeypatch, trust_graph):
    """Swap the process-wide trust graph for one with a recording notifier."""
    from django.apps import apps
    monkeypatch.setattr(apps.get_app_config('matching'), 'trust_graph', trust_graph)
    return trust_graph
