"""
Trust Graph Models
===================
Demonstrates:
- Directed edges between profiles with at most one row per ordered pair
- Flip-in-place state instead of deletes (history is kept)
- Append-only complaint log
- Indexes matching the discovery exclusion and monthly count queries
"""

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils.translation import gettext_lazy as _

from apps.users.models import Profile


# ============================================================================
# LIKE MODEL
# ============================================================================

class Like(models.Model):
    """
    Directed like edge. Withdrawing a like flips ``is_liked`` to False
    and keeps the row, so re-liking reuses the same edge.
    """
    liker = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='likes_given')
    liked = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='likes_received')
    is_liked = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'likes'
        unique_together = ['liker', 'liked']
        indexes = [
            models.Index(fields=['liked', 'is_liked'], name='likes_liked_idx'),
        ]

    def __str__(self):
        state = 'likes' if self.is_liked else 'no longer likes'
        return f"#{self.liker_id} {state} #{self.liked_id}"


# ============================================================================
# BLOCK MODEL
# ============================================================================

class Block(models.Model):
    """
    Directed block edge.

    A user-initiated block is written in both directions, so discovery
    only has to test ``viewer -> candidate``. A complaint writes the
    forward direction only.
    """
    blocker = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='blocks_made')
    blocked = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='blocks_received')
    is_blocked = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'blocks'
        unique_together = ['blocker', 'blocked']
        indexes = [
            models.Index(fields=['blocker', 'is_blocked'], name='blocks_blocker_idx'),
        ]

    def __str__(self):
        return f"#{self.blocker_id} blocked #{self.blocked_id}"


# ============================================================================
# COMPLAINT MODEL
# ============================================================================

class Complaint(models.Model):
    """
    Append-only complaint log. Rows are never updated or deleted; the
    monthly count against an accused profile drives auto-moderation.
    """
    complainant = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='complaints_filed')
    accused = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='complaints_received')
    reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'complaints'
        indexes = [
            models.Index(fields=['accused', 'created_at'], name='complaints_accused_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Complaint by #{self.complainant_id} against #{self.accused_id}"


# ============================================================================
# REVIEW MODEL
# ============================================================================

class Review(models.Model):
    """
    App review left by a profile. Soft-deleted, never removed.
    """
    author = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='reviews')
    message = models.TextField()
    rating = models.FloatField(
        validators=[MinValueValidator(0.0), MaxValueValidator(5.0)],
        help_text=_('0.0 to 5.0')
    )
    has_deleted = models.BooleanField(default=False)
    has_edited = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reviews'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Review #{self.pk} by #{self.author_id} ({self.rating})"
