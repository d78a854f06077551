"""
Discovery, Trust Graph & Review Serializers
============================================
Request parsing for discovery parameters and trust graph actions, and
rendering of edges and reviews.
"""

from rest_framework import serializers

from apps.common.geo import parse_point
from apps.users.models import Profile
from .models import Like, Block, Complaint, Review


# ============================================================================
# DISCOVERY
# ============================================================================

class DiscoveryQuerySerializer(serializers.Serializer):
    """
    Query parameters of the discovery feed. Every field is optional; a
    supplied field overrides the saved filter. Any malformed value
    rejects the whole request.
    """
    latitude = serializers.CharField(required=False, allow_blank=True)
    longitude = serializers.CharField(required=False, allow_blank=True)
    age_from = serializers.IntegerField(required=False, min_value=0, max_value=150)
    age_to = serializers.IntegerField(required=False, min_value=0, max_value=150)
    search_gender = serializers.ChoiceField(choices=Profile.SEARCH_GENDER_CHOICES, required=False)
    looking_for = serializers.CharField(required=False, allow_blank=True, max_length=50)
    distance = serializers.IntegerField(required=False, min_value=1)
    page = serializers.IntegerField(required=False, min_value=1)
    size = serializers.IntegerField(required=False, min_value=1)

    def validate(self, attrs):
        age_from = attrs.get('age_from')
        age_to = attrs.get('age_to')
        if age_from is not None and age_to is not None and age_from > age_to:
            raise serializers.ValidationError({'age_from': 'Must not be greater than age_to.'})
        attrs['point'] = parse_point(attrs.pop('latitude', None), attrs.pop('longitude', None))
        return attrs


class CandidateSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    display_name = serializers.CharField()
    is_online = serializers.BooleanField()
    last_online = serializers.DateTimeField()
    image = serializers.CharField(allow_null=True)
    distance = serializers.FloatField(allow_null=True)


# ============================================================================
# TRUST GRAPH
# ============================================================================

class LikeSerializer(serializers.ModelSerializer):
    liker_id = serializers.IntegerField(read_only=True)
    liked_id = serializers.IntegerField()

    class Meta:
        model = Like
        fields = ['id', 'liker_id', 'liked_id', 'is_liked', 'created_at', 'updated_at']
        read_only_fields = ['id', 'liker_id', 'is_liked', 'created_at', 'updated_at']


class BlockSerializer(serializers.ModelSerializer):
    blocker_id = serializers.IntegerField(read_only=True)
    blocked_id = serializers.IntegerField()

    class Meta:
        model = Block
        fields = ['id', 'blocker_id', 'blocked_id', 'is_blocked', 'created_at', 'updated_at']
        read_only_fields = ['id', 'blocker_id', 'is_blocked', 'created_at', 'updated_at']


class ComplaintSerializer(serializers.ModelSerializer):
    """
    Input is the accused and a reason; the response echoes only the
    record identity, not its moderation side effects.
    """
    accused_id = serializers.IntegerField(write_only=True)
    reason = serializers.CharField(write_only=True, allow_blank=True, max_length=2000)

    class Meta:
        model = Complaint
        fields = ['id', 'accused_id', 'reason', 'created_at']
        read_only_fields = ['id', 'created_at']


# ============================================================================
# REVIEWS
# ============================================================================

class ReviewSerializer(serializers.ModelSerializer):
    author_id = serializers.IntegerField(read_only=True)
    rating = serializers.FloatField(min_value=0.0, max_value=5.0)

    class Meta:
        model = Review
        fields = [
            'id', 'author_id', 'message', 'rating',
            'has_edited', 'has_deleted', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'author_id', 'has_edited', 'has_deleted', 'created_at', 'updated_at']

    def validate_message(self, value):
        if not value.strip():
            raise serializers.ValidationError('Message cannot be empty.')
        return value
