"""
Profile Service Layer
======================
Demonstrates:
- Thin models, business rules in services
- Upserts with update_or_create for per-profile rows
- Atomic multi-row transitions (soft delete)
- Validation before any storage access

Navigator and Filter stores are one row per profile, created lazily and
overwritten in place. They are zeroed, not deleted, when a profile goes.
"""

from django.conf import settings
from django.db import DatabaseError, transaction
from datetime import date
import logging

from apps.common.exceptions import ConflictError, NotFoundError, ValidationError
from apps.common.geo import Point, distance
from apps.common.storage import ImageStore
from .models import FilterPreference, Navigator, Profile, ProfileImage, age_on

logger = logging.getLogger(__name__)

MINIMUM_AGE = 18

PERSONAL_FIELDS = (
    'display_name', 'birthday', 'gender', 'search_gender', 'looking_for',
    'location', 'description', 'height', 'weight',
)

FLAG_FIELDS = ('is_show_distance', 'is_invisible')


# ============================================================================
# NAVIGATOR STORE
# ============================================================================

class NavigatorStore:
    """
    Current coordinate per profile. Coordinates arriving here were
    already validated at the request boundary.
    """

    @staticmethod
    def get(profile):
        return Navigator.objects.filter(profile=profile).first()

    @staticmethod
    def upsert(profile, point):
        navigator, created = Navigator.objects.update_or_create(
            profile=profile,
            defaults={'latitude': point.latitude, 'longitude': point.longitude},
        )
        if created:
            logger.debug('Navigator created for profile #%s', profile.pk)
        return navigator

    @staticmethod
    def zero(profile):
        Navigator.objects.filter(profile=profile).update(latitude=0.0, longitude=0.0)


# ============================================================================
# FILTER STORE
# ============================================================================

class FilterStore:

    @staticmethod
    def defaults():
        config = settings.DISCOVERY
        return {
            'search_gender': Profile.SEARCH_ALL,
            'looking_for': '',
            'age_from': config['DEFAULT_AGE_FROM'],
            'age_to': config['DEFAULT_AGE_TO'],
            'distance': config['DEFAULT_DISTANCE_KM'],
            'page': 1,
            'size': config['DEFAULT_PAGE_SIZE'],
        }

    @staticmethod
    def get(profile):
        """Stored preference, created with defaults on first use."""
        preference, _ = FilterPreference.objects.get_or_create(
            profile=profile,
            defaults=FilterStore.defaults(),
        )
        return preference

    @staticmethod
    def validate(values):
        """
        Reject inconsistent filter values before they are stored or used.

        Args:
            values: Complete set of filter fields (stored merged with overrides)
        """
        max_size = settings.DISCOVERY['MAX_PAGE_SIZE']

        if values['age_from'] > values['age_to']:
            raise ValidationError('age_from must not be greater than age_to.')
        if values['page'] < 1:
            raise ValidationError('Page must be a positive integer.')
        if not 1 <= values['size'] <= max_size:
            raise ValidationError(f'Page size must be between 1 and {max_size}.')
        if values['distance'] <= 0:
            raise ValidationError('Distance must be a positive number of kilometers.')
        if values['search_gender'] not in dict(Profile.SEARCH_GENDER_CHOICES):
            raise ValidationError('Unknown search gender.')

    @staticmethod
    def update(profile, **overrides):
        """
        Merge overrides into the stored preference and persist the result.

        Fields that are None are left untouched.
        """
        preference = FilterStore.get(profile)
        changes = {k: v for k, v in overrides.items() if v is not None}

        merged = {field: getattr(preference, field) for field in FilterStore.defaults()}
        merged.update(changes)
        FilterStore.validate(merged)

        if changes:
            for field, value in changes.items():
                setattr(preference, field, value)
            preference.save()
        return preference

    @staticmethod
    def zero(profile):
        FilterPreference.objects.filter(profile=profile).update(
            search_gender='', looking_for='', age_from=0, age_to=0,
            distance=0, page=0, size=0,
        )


# ============================================================================
# PROFILE SERVICE
# ============================================================================

class ProfileService:
    """
    Profile lifecycle and photo management.
    """

    @staticmethod
    def validate_birthday(birthday):
        if birthday is None:
            raise ValidationError('Birthday is required.')
        if birthday > date.today():
            raise ValidationError('Birthday cannot be in the future.')
        if age_on(birthday) < MINIMUM_AGE:
            raise ValidationError(f'You must be at least {MINIMUM_AGE} years old.')

    @staticmethod
    def create_profile(identity, data, point=None, images=(), image_store=None):
        """
        Create the profile for an identity lookup (user, session_id or
        telegram_id), with its Navigator and a default Filter.

        Photo files written before a failure are removed again, since the
        rows that referenced them are rolled back.

        Raises:
            ConflictError: the identity already owns a profile
            ValidationError: birthday missing, in the future or under age
        """
        image_store = image_store or ImageStore()
        written = []

        try:
            with transaction.atomic():
                if Profile.objects.filter(**identity).exists():
                    raise ConflictError('Profile already exists.')

                ProfileService.validate_birthday(data.get('birthday'))

                fields = {k: v for k, v in data.items() if k in PERSONAL_FIELDS + FLAG_FIELDS}
                profile = Profile.objects.create(**identity, **fields)

                if point is not None:
                    NavigatorStore.upsert(profile, point)
                FilterStore.get(profile)

                for upload in images:
                    image = ProfileService.add_image(profile, upload, image_store=image_store)
                    written.append(image.path)
        except Exception:
            for path in written:
                image_store.delete(path)
            raise

        logger.info('Profile #%s created', profile.pk)
        return profile

    @staticmethod
    def update_profile(profile, data, point=None):
        if profile.is_deleted:
            raise ConflictError('Profile is deleted.')
        if 'birthday' in data:
            ProfileService.validate_birthday(data['birthday'])

        for field, value in data.items():
            if field in PERSONAL_FIELDS + FLAG_FIELDS:
                setattr(profile, field, value)
        profile.save()

        if point is not None:
            NavigatorStore.upsert(profile, point)
        return profile

    @staticmethod
    def get_profile(profile_id):
        profile = Profile.objects.filter(pk=profile_id).first()
        if profile is None:
            raise NotFoundError('Profile not found.')
        return profile

    @staticmethod
    def soft_delete(profile, image_store=None):
        """
        Hide a profile for good.

        Images are soft-deleted and their files removed. Navigator and
        Filter rows are zeroed. Trust graph edges are kept for audit.
        """
        image_store = image_store or ImageStore()

        with transaction.atomic():
            locked = Profile.objects.select_for_update().get(pk=profile.pk)
            if locked.is_deleted:
                raise ConflictError('Profile is already deleted.')

            images = list(ProfileImage.objects.active().filter(profile=locked))
            ProfileImage.objects.filter(pk__in=[i.pk for i in images]).update(is_deleted=True)

            NavigatorStore.zero(locked)
            FilterStore.zero(locked)

            locked.display_name = ''
            locked.birthday = None
            locked.looking_for = ''
            locked.location = ''
            locked.description = ''
            locked.height = None
            locked.weight = None
            locked.is_deleted = True
            locked.save()

        # Files go only once the rows are committed
        for image in images:
            image_store.delete(image.path)

        logger.info('Profile #%s soft-deleted, %d images removed', locked.pk, len(images))
        return locked

    # ---------------------
    # Photos
    # ---------------------

    @staticmethod
    def add_image(profile, upload, is_private=False, image_store=None):
        """
        Store an uploaded photo and record its reference.

        Raises:
            ConflictError: profile deleted or photo limit reached
        """
        if profile.is_deleted:
            raise ConflictError('Profile is deleted.')

        limit = settings.MAX_PROFILE_PHOTOS
        if ProfileImage.objects.active().filter(profile=profile).count() >= limit:
            raise ConflictError(f'Maximum {limit} photos allowed.')

        image_store = image_store or ImageStore()
        path, url = image_store.save(profile.pk, upload, upload.name)

        try:
            return ProfileImage.objects.create(
                profile=profile,
                name=upload.name,
                path=path,
                url=url,
                size=upload.size or 0,
                is_private=is_private,
            )
        except DatabaseError:
            image_store.delete(path)
            raise

    @staticmethod
    def delete_image(profile, image_id, image_store=None):
        image = ProfileImage.objects.filter(pk=image_id, profile=profile).first()
        if image is None:
            raise NotFoundError('Image not found.')
        if image.is_deleted:
            raise ConflictError('Image is already deleted.')

        image.is_deleted = True
        image.is_primary = False
        image.save(update_fields=['is_deleted', 'is_primary', 'updated_at'])

        (image_store or ImageStore()).delete(image.path)

        if not ProfileImage.objects.active().filter(profile=profile, is_primary=True).exists():
            ProfileService._promote_primary(profile)
        return image

    @staticmethod
    def _promote_primary(profile):
        """Next live photo by upload order becomes primary."""
        successor = ProfileImage.objects.active().filter(profile=profile).order_by('id').first()
        if successor is not None:
            successor.is_primary = True
            successor.save(update_fields=['is_primary', 'updated_at'])

    @staticmethod
    def first_public_image(profile):
        return ProfileImage.objects.public().filter(profile=profile).order_by('id').first()

    # ---------------------
    # Detail view
    # ---------------------

    @staticmethod
    def distance_between(viewer, target):
        """
        Meters between two profiles, or None when either has no
        coordinate or the target hides its distance.
        """
        if not target.is_show_distance:
            return None
        viewer_nav = NavigatorStore.get(viewer)
        target_nav = NavigatorStore.get(target)
        if viewer_nav is None or target_nav is None:
            return None
        return distance(
            Point(viewer_nav.latitude, viewer_nav.longitude),
            Point(target_nav.latitude, target_nav.longitude),
        )
