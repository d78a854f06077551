"""
Resolve the acting profile for a request.

Clients reach the API three ways: a logged-in account (token or session
auth), a bare session identifier, or a Telegram user id. Each maps onto
one of the optional identity columns of ``Profile``.
"""

from apps.common.exceptions import NotFoundError, ValidationError
from apps.users.models import Profile

SESSION_HEADER = 'X-Session-Id'
TELEGRAM_HEADER = 'X-Telegram-Id'


def identity_lookup(request):
    """
    Build the ORM lookup identifying the caller, or None if the request
    carries no identity at all.
    """
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return {'user': user}

    session_id = request.headers.get(SESSION_HEADER)
    if session_id:
        return {'session_id': session_id}

    telegram_id = request.headers.get(TELEGRAM_HEADER)
    if telegram_id:
        try:
            return {'telegram_id': int(telegram_id)}
        except ValueError:
            raise ValidationError(f'{TELEGRAM_HEADER} must be an integer.')

    return None


def resolve_profile(request, touch=True):
    """
    Return the caller's profile and refresh its presence timestamp.

    Raises:
        NotFoundError: no identity supplied or no profile matches it
    """
    lookup = identity_lookup(request)
    if lookup is None:
        raise NotFoundError('Profile not found.')

    profile = Profile.objects.select_related('navigator', 'filter_preference').filter(**lookup).first()
    if profile is None:
        raise NotFoundError('Profile not found.')

    if touch:
        profile.touch()
    return profile
