import io
from datetime import date
from unittest import mock

import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from PIL import Image

from apps.common.exceptions import ConflictError, ValidationError
from apps.common.storage import ImageStore
from apps.users.models import FilterPreference, Navigator, Profile, ProfileImage, age_on
from apps.users.services import ProfileService
from tests.conftest import years_ago

pytestmark = pytest.mark.django_db


def png_upload(name='photo.png'):
    buffer = io.BytesIO()
    Image.new('RGB', (4, 4), color=(200, 30, 30)).save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


# ============================================================================
# Create
# ============================================================================

def test_create_profile_with_session_identity(api_client):
    api_client.credentials(HTTP_X_SESSION_ID='abc-123')
    response = api_client.post('/api/profiles/', {
        'display_name': 'Maya',
        'birthday': years_ago(25).isoformat(),
        'gender': 'woman',
        'search_gender': 'man',
        'latitude': '12.5',
        'longitude': '-8.0',
    }, format='json')

    assert response.status_code == 201
    profile = Profile.objects.get(session_id='abc-123')
    assert response.data['id'] == profile.pk
    assert response.data['age'] == 25
    assert (profile.navigator.latitude, profile.navigator.longitude) == (12.5, -8.0)
    preference = FilterPreference.objects.get(profile=profile)
    assert (preference.age_from, preference.age_to, preference.distance) == (18, 100, 100)


def test_create_profile_for_logged_in_user(api_client, django_user_model):
    user = django_user_model.objects.create_user(email='u@example.com', username='u', password='pw-12345678')
    api_client.force_authenticate(user)

    response = api_client.post('/api/profiles/', {'display_name': 'U', 'birthday': years_ago(30).isoformat()}, format='json')

    assert response.status_code == 201
    assert Profile.objects.get(user=user).display_name == 'U'
    assert not Navigator.objects.filter(profile__user=user).exists()


def test_second_profile_for_same_identity_conflicts(api_client, make_profile):
    make_profile(session_id='taken')
    api_client.credentials(HTTP_X_SESSION_ID='taken')

    response = api_client.post('/api/profiles/', {'display_name': 'again', 'birthday': years_ago(30).isoformat()}, format='json')

    assert response.status_code == 409
    assert response.data == {'error': 'Profile already exists.'}


def test_create_requires_identity(api_client):
    response = api_client.post('/api/profiles/', {'display_name': 'nobody'}, format='json')
    assert response.status_code == 400


def test_minors_are_rejected(api_client):
    api_client.credentials(HTTP_X_SESSION_ID='young')
    response = api_client.post('/api/profiles/', {'birthday': years_ago(17).isoformat()}, format='json')

    assert response.status_code == 400
    assert not Profile.objects.filter(session_id='young').exists()


def test_create_requires_birthday(api_client):
    api_client.credentials(HTTP_X_SESSION_ID='no-birthday')
    response = api_client.post('/api/profiles/', {'display_name': 'x', 'gender': 'man'}, format='json')

    assert response.status_code == 400
    assert 'birthday' in response.data['details']
    assert not Profile.objects.filter(session_id='no-birthday').exists()


def test_service_rejects_missing_birthday():
    with pytest.raises(ValidationError):
        ProfileService.create_profile({'session_id': 'direct'}, {'display_name': 'x'})
    assert not Profile.objects.filter(session_id='direct').exists()


def test_create_removes_written_photos_when_it_fails(settings):
    settings.MAX_PROFILE_PHOTOS = 1
    store = ImageStore()

    with mock.patch.object(store, 'delete', wraps=store.delete) as delete:
        with pytest.raises(ConflictError):
            ProfileService.create_profile(
                {'session_id': 'two-photos'},
                {'birthday': years_ago(30)},
                images=[png_upload('a.png'), png_upload('b.png')],
                image_store=store,
            )

    assert not Profile.objects.filter(session_id='two-photos').exists()
    assert not ProfileImage.objects.exists()
    assert delete.call_count == 1
    assert not default_storage.exists(delete.call_args[0][0])


def test_create_rejects_half_a_coordinate(api_client):
    api_client.credentials(HTTP_X_SESSION_ID='half')
    response = api_client.post('/api/profiles/', {'latitude': '10', 'birthday': years_ago(30).isoformat()}, format='json')
    assert response.status_code == 400


# ============================================================================
# Me
# ============================================================================

def test_get_me_upserts_navigator(make_profile, client_for):
    profile = make_profile(lat=1.0, lon=1.0)

    response = client_for(profile).get('/api/profiles/me/', {'latitude': '2.0', 'longitude': '3.0'})

    assert response.status_code == 200
    assert response.data['session_id'] == profile.session_id
    assert Navigator.objects.filter(profile=profile).count() == 1
    navigator = Navigator.objects.get(profile=profile)
    assert (navigator.latitude, navigator.longitude) == (2.0, 3.0)


def test_telegram_identity(api_client, make_profile):
    profile = make_profile(telegram_id=777)
    api_client.credentials(HTTP_X_TELEGRAM_ID='777')

    assert api_client.get('/api/profiles/me/').data['id'] == profile.pk

    api_client.credentials(HTTP_X_TELEGRAM_ID='not-a-number')
    assert api_client.get('/api/profiles/me/').status_code == 400


def test_unknown_identity_is_not_found(api_client, db):
    api_client.credentials(HTTP_X_SESSION_ID='nobody')
    response = api_client.get('/api/profiles/me/')
    assert response.status_code == 404
    assert response.data == {'error': 'Profile not found.'}


def test_patch_me(make_profile, client_for):
    profile = make_profile()

    response = client_for(profile).patch('/api/profiles/me/', {'description': 'Hiking', 'height': 170}, format='json')

    assert response.status_code == 200
    profile.refresh_from_db()
    assert profile.description == 'Hiking'
    assert profile.height == 170


def test_patch_cannot_clear_birthday(make_profile, client_for):
    profile = make_profile(age=30)

    response = client_for(profile).patch('/api/profiles/me/', {'birthday': None}, format='json')

    assert response.status_code == 400
    profile.refresh_from_db()
    assert profile.age == 30


# ============================================================================
# Soft delete
# ============================================================================

def test_soft_delete_clears_profile_and_files(make_profile, client_for):
    profile = make_profile(lat=5.0, lon=5.0, description='bio')
    FilterPreference.objects.create(profile=profile, age_from=20, age_to=40)
    image = ProfileService.add_image(profile, png_upload())
    assert default_storage.exists(image.path)

    response = client_for(profile).post('/api/profiles/me/delete/')

    assert response.status_code == 200
    profile.refresh_from_db()
    assert profile.is_deleted is True
    assert profile.description == ''
    assert ProfileImage.objects.get(pk=image.pk).is_deleted is True
    assert not default_storage.exists(image.path)
    navigator = Navigator.objects.get(profile=profile)
    assert (navigator.latitude, navigator.longitude) == (0.0, 0.0)
    preference = FilterPreference.objects.get(profile=profile)
    assert (preference.age_from, preference.age_to, preference.distance) == (0, 0, 0)

    again = client_for(profile).post('/api/profiles/me/delete/')
    assert again.status_code == 409


# ============================================================================
# Images
# ============================================================================

def test_upload_images(make_profile, client_for):
    profile = make_profile()
    client = client_for(profile)

    first = client.post('/api/profiles/me/images/', {'image': png_upload('a.png')}, format='multipart')
    second = client.post('/api/profiles/me/images/', {'image': png_upload('b.png'), 'is_private': 'true'}, format='multipart')

    assert first.status_code == 201 and second.status_code == 201
    assert first.data['is_primary'] is True
    assert second.data['is_primary'] is False
    assert second.data['is_private'] is True
    assert first.data['url'].startswith('/media/profiles/')


def test_upload_rejects_non_images(make_profile, client_for):
    profile = make_profile()
    bogus = SimpleUploadedFile('x.png', b'not an image', content_type='image/png')

    response = client_for(profile).post('/api/profiles/me/images/', {'image': bogus}, format='multipart')

    assert response.status_code == 400


def test_photo_limit(make_profile, client_for, settings):
    settings.MAX_PROFILE_PHOTOS = 1
    profile = make_profile()
    client = client_for(profile)

    assert client.post('/api/profiles/me/images/', {'image': png_upload()}, format='multipart').status_code == 201
    assert client.post('/api/profiles/me/images/', {'image': png_upload()}, format='multipart').status_code == 409


def test_add_image_removes_file_when_row_fails(make_profile):
    profile = make_profile()
    store = ImageStore()

    with mock.patch.object(ProfileImage.objects, 'create', side_effect=DatabaseError('boom')):
        with mock.patch.object(store, 'delete', wraps=store.delete) as delete:
            with pytest.raises(DatabaseError):
                ProfileService.add_image(profile, png_upload(), image_store=store)

    delete.assert_called_once()
    assert not default_storage.exists(delete.call_args[0][0])


def test_delete_image(make_profile, client_for):
    owner, other = make_profile(), make_profile()
    first = ProfileService.add_image(owner, png_upload('a.png'))
    second = ProfileService.add_image(owner, png_upload('b.png'))

    assert client_for(other).post(f'/api/profiles/images/{first.pk}/delete/').status_code == 404

    client = client_for(owner)
    assert client.post(f'/api/profiles/images/{first.pk}/delete/').status_code == 200
    assert client.post(f'/api/profiles/images/{first.pk}/delete/').status_code == 409

    second.refresh_from_db()
    assert second.is_primary is True
    assert not default_storage.exists(first.path)


# ============================================================================
# Public and detail views
# ============================================================================

def test_public_profile(api_client, make_profile):
    profile = make_profile(display_name='Lena')

    assert api_client.get(f'/api/profiles/{profile.pk}/').data['display_name'] == 'Lena'
    assert api_client.get('/api/profiles/999999/').status_code == 404


def test_detail_reports_distance_and_like(make_profile, client_for, app_trust_graph):
    viewer = make_profile(lat=0.0, lon=0.0)
    target = make_profile(lat=0.0, lon=0.05)
    edge = app_trust_graph.like(viewer, target.pk)

    response = client_for(viewer).get(f'/api/profiles/{target.pk}/detail/')

    assert response.status_code == 200
    assert response.data['distance'] == pytest.approx(5566, abs=1)
    assert response.data['like']['id'] == edge.pk
    assert response.data['images'] == []


def test_detail_distance_hidden_or_unknown(make_profile, client_for):
    viewer = make_profile(lat=0.0, lon=0.0)
    shy = make_profile(lat=0.0, lon=0.05, is_show_distance=False)
    nowhere = make_profile()

    client = client_for(viewer)
    assert client.get(f'/api/profiles/{shy.pk}/detail/').data['distance'] is None
    assert client.get(f'/api/profiles/{nowhere.pk}/detail/').data['distance'] is None


def test_detail_hides_blocked_profiles(make_profile, client_for, app_trust_graph):
    viewer, target = make_profile(), make_profile()
    app_trust_graph.block(target, viewer.pk)

    assert client_for(viewer).get(f'/api/profiles/{target.pk}/detail/').status_code == 404


def test_age_counts_completed_years(make_profile):
    assert age_on(date(2000, 6, 15), today=date(2026, 6, 14)) == 25
    assert age_on(date(2000, 6, 15), today=date(2026, 6, 15)) == 26
    assert make_profile(age=40).age == 40
    assert Profile(birthday=None).age is None
