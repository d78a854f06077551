import random

import pytest
from django.core.management import CommandError, call_command

from apps.common.geo import Point, distance
from apps.users.management.commands.seed_profiles import scatter
from apps.users.models import FilterPreference, Profile


@pytest.mark.django_db
def test_seed_profiles_creates_located_profiles():
    call_command('seed_profiles', '--count', '5', '--lat', '48.85', '--lon', '2.35', '--radius-km', '3', '--seed', '7')

    profiles = Profile.objects.select_related('navigator')
    assert profiles.count() == 5
    assert FilterPreference.objects.count() == 5
    for profile in profiles:
        assert profile.age >= 18
        point = Point(profile.navigator.latitude, profile.navigator.longitude)
        assert distance(Point(48.85, 2.35), point) <= 3000 * 1.01


@pytest.mark.django_db
def test_seed_profiles_rejects_bad_arguments():
    with pytest.raises(CommandError):
        call_command('seed_profiles', '--count', '0')
    with pytest.raises(CommandError):
        call_command('seed_profiles', '--lat', '100')


def test_scatter_stays_within_radius():
    rng = random.Random(1)
    center = Point(-33.9, 151.2)
    for _ in range(200):
        assert distance(center, scatter(center, 10, rng=rng)) <= 10000 * 1.01
