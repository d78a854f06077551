import pytest

from apps.matching.models import Review

pytestmark = pytest.mark.django_db


@pytest.fixture
def author(make_profile):
    return make_profile(display_name='author')


def test_add_and_get_review(author, client_for, api_client):
    response = client_for(author).post('/api/reviews/', {'message': 'Great app', 'rating': 4.5}, format='json')

    assert response.status_code == 201
    assert response.data['author_id'] == author.pk
    assert response.data['has_edited'] is False

    api_client.credentials()
    fetched = api_client.get(f"/api/reviews/{response.data['id']}/")
    assert fetched.data['message'] == 'Great app'


@pytest.mark.parametrize('payload', [
    {'message': 'ok', 'rating': 5.5},
    {'message': 'ok', 'rating': -1},
    {'message': '   ', 'rating': 3},
    {'rating': 3},
])
def test_invalid_reviews_are_rejected(author, client_for, payload):
    response = client_for(author).post('/api/reviews/', payload, format='json')
    assert response.status_code == 400
    assert response.data['error'] == 'Invalid input.'


def test_update_marks_review_edited(author, client_for):
    review = Review.objects.create(author=author, message='meh', rating=2)

    response = client_for(author).patch(f'/api/reviews/{review.pk}/', {'rating': 4}, format='json')

    assert response.status_code == 200
    review.refresh_from_db()
    assert review.rating == 4
    assert review.message == 'meh'
    assert review.has_edited is True


def test_only_author_can_change_review(author, make_profile, client_for):
    review = Review.objects.create(author=author, message='mine', rating=3)
    stranger = make_profile()

    client = client_for(stranger)
    assert client.patch(f'/api/reviews/{review.pk}/', {'rating': 1}, format='json').status_code == 404
    assert client.delete(f'/api/reviews/{review.pk}/').status_code == 404


def test_soft_delete_review(author, client_for):
    review = Review.objects.create(author=author, message='bye', rating=1)
    client = client_for(author)

    assert client.delete(f'/api/reviews/{review.pk}/').status_code == 200
    assert Review.objects.get(pk=review.pk).has_deleted is True
    assert client.delete(f'/api/reviews/{review.pk}/').status_code == 409
    assert client.patch(f'/api/reviews/{review.pk}/', {'rating': 2}, format='json').status_code == 409
    assert client.get(f'/api/reviews/{review.pk}/').status_code == 404


def test_list_filters_and_paginates(author, make_profile, api_client):
    other = make_profile()
    for n in range(3):
        Review.objects.create(author=author, message=f'Lovely app {n}', rating=5)
    Review.objects.create(author=other, message='lovely too', rating=4)
    Review.objects.create(author=other, message='Terrible', rating=0)
    Review.objects.create(author=author, message='lovely but deleted', rating=5, has_deleted=True)

    response = api_client.get('/api/reviews/', {'search': 'LOVELY', 'size': 2})

    assert response.status_code == 200
    assert response.data['pagination'] == {
        'has_next': True,
        'has_previous': False,
        'page_count': 2,
        'page_size': 2,
        'page': 1,
        'total_items': 4,
    }
    assert len(response.data['content']) == 2

    by_author = api_client.get('/api/reviews/', {'profile_id': other.pk})
    assert {r['message'] for r in by_author.data['content']} == {'lovely too', 'Terrible'}

    assert api_client.get('/api/reviews/', {'profile_id': 'x'}).status_code == 400
