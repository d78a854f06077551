"""
Discovery & Trust Graph Service Layer
======================================
Demonstrates:
- Database-side geo filtering and ordering through ORM expressions
- A single predicate shared by the page query and its count query
- Correlated subqueries instead of per-row lookups
- Atomic multi-row moderation transitions

Discovery pipeline:
1. Resolve the effective filter (overrides win and are persisted)
2. Translate the age range into a birthdate window
3. Hard exclusions (deleted, globally blocked, self, blocked by viewer)
4. Demographic filter (gender, birthdate window)
5. Geo filter (must have a Navigator, within radius)
6. Order by distance, then most recently online
7. Offset/limit pagination
8. Attach the first public image
"""

from django.conf import settings
from django.db import transaction
from django.db.models import Exists, OuterRef, Subquery
from django.utils import timezone
from datetime import date, datetime, timedelta, timezone as dt_timezone
import logging

from apps.common.exceptions import ConflictError, NotFoundError, ValidationError
from apps.common.geo import Point, distance_expression, km_to_meters
from apps.common.pagination import page_bounds, paginate
from apps.users.models import Profile, ProfileImage
from apps.users.notifications import send_like_notification
from apps.users.services import FilterStore, NavigatorStore
from .models import Block, Complaint, Like, Review

logger = logging.getLogger(__name__)


# ============================================================================
# DISCOVERY SERVICE
# ============================================================================

class DiscoveryService:
    """
    Candidate selection for the discovery feed.
    """

    @staticmethod
    def birthdate_window(age_from, age_to, today=None):
        """
        Inclusive calendar-year approximation of an age range.

        Anyone born in [Jan 1 of (year - age_to - 1), Dec 31 of
        (year - age_from)] qualifies. Exact day-level age is not
        computed, so the window can admit someone a year outside the
        range at either edge.

        Returns:
            tuple: (earliest birthday, latest birthday)
        """
        today = today or date.today()
        start_year = today.year - age_to - 1
        end_year = today.year - age_from
        return date(start_year, 1, 1), date(end_year, 12, 31)

    @staticmethod
    def resolve_filter(viewer, overrides=None):
        """
        Effective filter for a discovery call.

        Override values replace the stored ones and are written back, so
        the next call without parameters sees the same criteria.
        """
        return FilterStore.update(viewer, **(overrides or {}))

    @staticmethod
    def candidate_queryset(viewer, preference, origin, today=None):
        """
        Eligible candidates annotated with ``distance`` in meters.

        Unordered and unsliced: the same queryset backs the page and the
        total count.
        """
        earliest, latest = DiscoveryService.birthdate_window(
            preference.age_from, preference.age_to, today=today
        )

        blocked_by_viewer = Block.objects.filter(
            blocker=viewer,
            blocked=OuterRef('pk'),
            is_blocked=True,
        )

        candidates = (
            Profile.objects
            .filter(is_deleted=False, is_blocked=False)
            .exclude(pk=viewer.pk)
            .filter(~Exists(blocked_by_viewer))
            .filter(birthday__range=(earliest, latest))
        )

        if preference.search_gender and preference.search_gender != Profile.SEARCH_ALL:
            candidates = candidates.filter(gender=preference.search_gender)

        return (
            candidates
            .filter(navigator__isnull=False)
            .annotate(distance=distance_expression(origin, 'navigator__latitude', 'navigator__longitude'))
            .filter(distance__lte=km_to_meters(preference.distance))
        )

    @staticmethod
    def discover(viewer, overrides=None, point=None, today=None, now=None):
        """
        One page of candidates for ``viewer``.

        Args:
            viewer: Acting profile
            overrides: Filter fields supplied with this request (None values ignored)
            point: Viewer's current coordinate, upserted before querying
            today: Date used for the birthdate window (tests)
            now: Time used for the online flag (tests)

        Returns:
            dict: {'pagination': {...}, 'content': [...]}

        Raises:
            ConflictError: viewer profile is deleted
            ValidationError: bad filter values, or no known location
        """
        if viewer.is_deleted:
            raise ConflictError('Profile is deleted.')

        preference = DiscoveryService.resolve_filter(viewer, overrides)

        if point is not None:
            navigator = NavigatorStore.upsert(viewer, point)
        else:
            navigator = NavigatorStore.get(viewer)
        if navigator is None:
            raise ValidationError('Location required: send latitude and longitude.')

        origin = Point(navigator.latitude, navigator.longitude)
        candidates = DiscoveryService.candidate_queryset(viewer, preference, origin, today=today)

        first_image = (
            ProfileImage.objects.public()
            .filter(profile=OuterRef('pk'))
            .order_by('id')
            .values('url')[:1]
        )

        offset, limit = page_bounds(preference.page, preference.size)
        total_items = candidates.count()
        rows = list(
            candidates
            .annotate(image=Subquery(first_image))
            .order_by('distance', '-last_online', 'id')[offset:offset + limit]
        )

        logger.debug(
            'Discovery for profile #%s: %d of %d candidates (page %d)',
            viewer.pk, len(rows), total_items, preference.page
        )

        now = now or timezone.now()
        return {
            'pagination': paginate(preference.size, preference.page, total_items),
            'content': [DiscoveryService.summarize(row, now) for row in rows],
        }

    @staticmethod
    def summarize(candidate, now):
        return {
            'id': candidate.pk,
            'display_name': candidate.display_name,
            'is_online': candidate.is_online(now),
            'last_online': candidate.last_online,
            'image': candidate.image,
            'distance': candidate.distance if candidate.is_show_distance else None,
        }


# ============================================================================
# TRUST GRAPH
# ============================================================================

def month_bounds(moment):
    """UTC [start of month, start of next month) containing ``moment``."""
    moment = moment.astimezone(dt_timezone.utc)
    start = datetime(moment.year, moment.month, 1, tzinfo=dt_timezone.utc)
    next_start = (start + timedelta(days=32)).replace(day=1)
    return start, next_start


class TrustGraph:
    """
    Likes, blocks and complaints between profiles, and the moderation
    state derived from them.

    Built once at startup with the notifier it should use.
    """

    def __init__(self, notifier, complaint_threshold=None):
        self.notifier = notifier
        if complaint_threshold is None:
            complaint_threshold = settings.DISCOVERY['COMPLAINT_BLOCK_THRESHOLD']
        self.complaint_threshold = complaint_threshold

    @staticmethod
    def _target(profile_id, actor):
        if profile_id == actor.pk:
            raise ValidationError('You cannot do this to your own profile.')
        target = Profile.objects.filter(pk=profile_id).first()
        if target is None:
            raise NotFoundError('Profile not found.')
        return target

    # ---------------------
    # Likes
    # ---------------------

    def like(self, liker, liked_id):
        """
        Upsert ``liker -> liked`` with is_liked=True.

        Repeating the call returns the same edge.
        """
        liked = self._target(liked_id, liker)
        # Blocks are written both ways, so the liker's side covers either party
        if not self.is_visible_to(liker, liked):
            raise ConflictError('Profile is not available.')

        edge, created = Like.objects.get_or_create(liker=liker, liked=liked)
        newly_liked = created or not edge.is_liked
        if not edge.is_liked:
            edge.is_liked = True
            edge.save(update_fields=['is_liked', 'updated_at'])

        if newly_liked:
            transaction.on_commit(lambda: send_like_notification(self.notifier, liker, liked))
        return edge

    def unlike(self, edge_id, actor):
        """
        Flip an edge owned by ``actor`` to is_liked=False. The row stays.
        """
        edge = Like.objects.filter(pk=edge_id, liker=actor).first()
        if edge is None:
            raise NotFoundError('Like not found.')
        if edge.is_liked:
            edge.is_liked = False
            edge.save(update_fields=['is_liked', 'updated_at'])
        return edge

    def like_status_for(self, viewer, target):
        """Viewer's edge toward target, liked or not, or None."""
        return Like.objects.filter(liker=viewer, liked=target).first()

    # ---------------------
    # Blocks
    # ---------------------

    @staticmethod
    def _set_block(blocker, blocked):
        edge, _ = Block.objects.update_or_create(
            blocker=blocker,
            blocked=blocked,
            defaults={'is_blocked': True},
        )
        return edge

    def block(self, blocker, blocked_id):
        """
        Block in both directions. Either both edges are written or neither.

        Returns:
            Block: the forward edge
        """
        blocked = self._target(blocked_id, blocker)
        if blocked.is_deleted:
            raise ConflictError('Profile is deleted.')

        with transaction.atomic():
            forward = self._set_block(blocker, blocked)
            self._set_block(blocked, blocker)

        logger.info('Mutual block between profiles #%s and #%s', blocker.pk, blocked.pk)
        return forward

    def is_visible_to(self, viewer, target):
        if target.is_deleted or target.is_blocked:
            return False
        return not Block.objects.filter(blocker=viewer, blocked=target, is_blocked=True).exists()

    # ---------------------
    # Complaints
    # ---------------------

    def complaints_this_month(self, accused, now=None):
        start, end = month_bounds(now or timezone.now())
        return Complaint.objects.filter(
            accused=accused,
            created_at__gte=start,
            created_at__lt=end,
        ).count()

    def file_complaint(self, complainant, accused_id, reason=''):
        """
        Record a complaint, hide the accused from the complainant, and
        block the accused globally once this month's complaint count
        exceeds the threshold.

        The whole sequence commits or fails as one unit.
        """
        accused = self._target(accused_id, complainant)
        if accused.is_deleted:
            raise ConflictError('Profile is deleted.')

        with transaction.atomic():
            complaint = Complaint.objects.create(
                complainant=complainant,
                accused=accused,
                reason=reason,
            )
            self._set_block(complainant, accused)

            count = self.complaints_this_month(accused, now=complaint.created_at)
            if count > self.complaint_threshold and not accused.is_blocked:
                accused.is_blocked = True
                accused.save()
                logger.info(
                    'Profile #%s auto-blocked after %d complaints this month', accused.pk, count
                )

        logger.info('Complaint #%s filed against profile #%s', complaint.pk, accused.pk)
        return complaint


# ============================================================================
# REVIEW SERVICE
# ============================================================================

class ReviewService:

    @staticmethod
    def list_reviews(profile_id=None, search=None):
        """Live reviews, newest first, optionally by author and message text."""
        reviews = Review.objects.filter(has_deleted=False).select_related('author')
        if profile_id is not None:
            reviews = reviews.filter(author_id=profile_id)
        if search:
            reviews = reviews.filter(message__icontains=search)
        return reviews.order_by('-created_at', '-id')

    @staticmethod
    def get_review(review_id):
        review = Review.objects.filter(pk=review_id, has_deleted=False).first()
        if review is None:
            raise NotFoundError('Review not found.')
        return review

    @staticmethod
    def add_review(author, message, rating):
        if author.is_deleted:
            raise ConflictError('Profile is deleted.')
        return Review.objects.create(author=author, message=message, rating=rating)

    @staticmethod
    def _own_review(review_id, author):
        review = Review.objects.filter(pk=review_id, author=author).first()
        if review is None:
            raise NotFoundError('Review not found.')
        if review.has_deleted:
            raise ConflictError('Review is deleted.')
        return review

    @staticmethod
    def update_review(review_id, author, message=None, rating=None):
        review = ReviewService._own_review(review_id, author)
        if message is not None:
            review.message = message
        if rating is not None:
            review.rating = rating
        review.has_edited = True
        review.save()
        return review

    @staticmethod
    def delete_review(review_id, author):
        review = ReviewService._own_review(review_id, author)
        review.has_deleted = True
        review.save(update_fields=['has_deleted', 'updated_at'])
        return review
