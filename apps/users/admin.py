from django.contrib import admin
import logging

from .models import User, Profile, ProfileImage, Navigator, FilterPreference

logger = logging.getLogger(__name__)

admin.site.register(User)
admin.site.register(Navigator)
admin.site.register(FilterPreference)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['id', 'display_name', 'gender', 'is_deleted', 'is_blocked', 'last_online']
    list_filter = ['gender', 'is_deleted', 'is_blocked', 'is_premium']
    search_fields = ['display_name', 'session_id', 'telegram_id']
    readonly_fields = ['created_at', 'updated_at', 'last_online']
    actions = ['lift_moderation_block']

    @admin.action(description='Lift moderation block')
    def lift_moderation_block(self, request, queryset):
        """
        The only way back from a complaint-triggered block. Complaint
        history and pairwise block edges are left untouched.
        """
        profiles = list(queryset.filter(is_blocked=True))
        for profile in profiles:
            profile.is_blocked = False
            profile.save()
            logger.info('Moderation block lifted for profile #%s by %s', profile.pk, request.user)
        self.message_user(request, f'{len(profiles)} profile(s) unblocked.')


@admin.register(ProfileImage)
class ProfileImageAdmin(admin.ModelAdmin):
    list_display = ['id', 'profile', 'name', 'is_primary', 'is_private', 'is_deleted', 'is_blocked']
    list_filter = ['is_private', 'is_deleted', 'is_blocked']
    search_fields = ['profile__display_name', 'name']
