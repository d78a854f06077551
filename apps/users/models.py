from django.db import models
from django.conf import settings
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from datetime import date, timedelta
import uuid

from apps.common.geo import Point


# ==============================
# Custom User Manager
# ==============================
class UserManager(BaseUserManager):
    """
    Custom user manager that uses email instead of username for authentication.
    """
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError(_('Users must have an email address'))
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, password, **extra_fields)


# ==============================
# Custom User Model
# ==============================
class User(AbstractUser):
    """
    Login account. A dating profile hangs off it one-to-one; the account
    is only one of several ways to resolve the acting profile.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    username = models.CharField(max_length=150, unique=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    def __str__(self):
        return self.username or self.email


def age_on(birthday, today=None):
    """Whole years completed by ``today`` (defaults to the current date)."""
    today = today or date.today()
    return today.year - birthday.year - ((today.month, today.day) < (birthday.month, birthday.day))


# ==============================
# Profile Model
# ==============================
class Profile(models.Model):
    """
    Canonical dating profile.

    Identity keys (account, session id, Telegram id) are all optional and
    sit side by side; whichever the client has resolves to the same row.
    Soft-deleted and globally blocked profiles never appear in discovery.
    """

    GENDER_MAN = 'man'
    GENDER_WOMAN = 'woman'
    SEARCH_ALL = 'all'

    GENDER_CHOICES = [
        (GENDER_MAN, 'Man'),
        (GENDER_WOMAN, 'Woman'),
    ]

    SEARCH_GENDER_CHOICES = GENDER_CHOICES + [(SEARCH_ALL, 'All')]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='profile',
    )
    session_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    telegram_id = models.BigIntegerField(unique=True, null=True, blank=True)

    display_name = models.CharField(max_length=100, blank=True)
    birthday = models.DateField(null=True, blank=True, help_text=_('Source of age'))
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    search_gender = models.CharField(
        max_length=10, choices=SEARCH_GENDER_CHOICES, default=SEARCH_ALL, blank=True
    )
    looking_for = models.CharField(max_length=50, blank=True)
    location = models.CharField(max_length=255, blank=True, help_text=_('Free-text city or area'))
    description = models.TextField(blank=True)
    height = models.PositiveSmallIntegerField(null=True, blank=True, help_text=_('Centimeters'))
    weight = models.PositiveSmallIntegerField(null=True, blank=True, help_text=_('Kilograms'))

    # Moderation and visibility flags
    is_deleted = models.BooleanField(default=False)
    is_blocked = models.BooleanField(default=False, help_text=_('Hidden from everyone'))
    is_premium = models.BooleanField(default=False)
    is_show_distance = models.BooleanField(default=True)
    is_invisible = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_online = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'profiles'
        indexes = [
            models.Index(fields=['is_deleted', 'is_blocked', 'gender'], name='profiles_visibility_idx'),
            models.Index(fields=['birthday'], name='profiles_birthday_idx'),
        ]

    def __str__(self):
        return f"Profile #{self.pk} {self.display_name}".strip()

    # ---------------------
    # Computed Properties
    # ---------------------
    @property
    def age(self):
        if not self.birthday:
            return None
        return age_on(self.birthday)

    def is_online(self, now=None):
        """Online while last activity is inside the configured window."""
        now = now or timezone.now()
        window = timedelta(minutes=settings.DISCOVERY['ONLINE_WINDOW_MINUTES'])
        return now - self.last_online < window

    def touch(self):
        """Refresh last_online without rewriting the whole row."""
        now = timezone.now()
        Profile.objects.filter(pk=self.pk).update(last_online=now)
        self.last_online = now


# ==============================
# Profile Image
# ==============================
class ProfileImageQuerySet(models.QuerySet):

    def public(self):
        """Images anyone may see: not private, deleted or blocked."""
        return self.filter(is_private=False, is_deleted=False, is_blocked=False)

    def active(self):
        return self.filter(is_deleted=False)


class ProfileImage(models.Model):
    """
    Photo reference. Bytes live in file storage; only path and URL are kept.
    """
    profile = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name='images')
    name = models.CharField(max_length=255, blank=True)
    path = models.CharField(max_length=500, blank=True)
    url = models.CharField(max_length=500, blank=True)
    size = models.PositiveIntegerField(default=0)
    is_deleted = models.BooleanField(default=False)
    is_blocked = models.BooleanField(default=False)
    is_primary = models.BooleanField(default=False)
    is_private = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProfileImageQuerySet.as_manager()

    class Meta:
        db_table = 'profile_images'
        ordering = ['id']
        indexes = [
            models.Index(fields=['profile', 'is_deleted', 'is_private'], name='profile_images_public_idx'),
        ]

    def __str__(self):
        return f"Image {self.name} of profile #{self.profile_id}"

    def save(self, *args, **kwargs):
        """The first live photo of a profile becomes primary."""
        if self.pk is None and not ProfileImage.objects.active().filter(profile=self.profile).exists():
            self.is_primary = True
        super().save(*args, **kwargs)


# ==============================
# Navigator
# ==============================
class Navigator(models.Model):
    """
    Last known coordinate of a profile. Upserted, never versioned.
    """
    profile = models.OneToOneField(Profile, on_delete=models.CASCADE, related_name='navigator')
    latitude = models.FloatField()
    longitude = models.FloatField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'profile_navigators'

    def __str__(self):
        return f"Navigator of profile #{self.profile_id} ({self.latitude}, {self.longitude})"

    @property
    def point(self):
        return Point(self.latitude, self.longitude)


# ==============================
# Filter Preference
# ==============================
class FilterPreference(models.Model):
    """
    Saved discovery criteria. Radius is kilometers; page is 1-based.
    """
    profile = models.OneToOneField(Profile, on_delete=models.CASCADE, related_name='filter_preference')
    search_gender = models.CharField(
        max_length=10, choices=Profile.SEARCH_GENDER_CHOICES, default=Profile.SEARCH_ALL, blank=True
    )
    looking_for = models.CharField(max_length=50, blank=True)
    age_from = models.PositiveSmallIntegerField(default=18)
    age_to = models.PositiveSmallIntegerField(default=100)
    distance = models.PositiveIntegerField(default=100, help_text=_('Search radius in kilometers'))
    page = models.PositiveIntegerField(default=1)
    size = models.PositiveIntegerField(default=10)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'profile_filters'

    def __str__(self):
        return f"Filter of profile #{self.profile_id}"
