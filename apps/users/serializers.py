"""
User & Profile Serializers
===========================
Demonstrates:
- Separation of read/write serializers
- Coordinates validated at the request boundary
- SerializerMethodField for derived values (age, presence, image)
"""

from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from django.contrib.auth import authenticate

from apps.common.geo import parse_point
from .models import User, Profile, ProfileImage, FilterPreference


# ============================================================================
# AUTHENTICATION SERIALIZERS
# ============================================================================

class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Account registration. The dating profile is created separately.
    """
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'password_confirm']
        extra_kwargs = {'email': {'required': True}}

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match.'
            })
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        return User.objects.create_user(
            username=validated_data['username'],
            email=validated_data['email'],
            password=validated_data['password']
        )


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get('request'),
            email=attrs['email'],
            password=attrs['password']
        )
        if not user:
            raise serializers.ValidationError(
                'Unable to login with provided credentials.',
                code='authorization'
            )
        if not user.is_active:
            raise serializers.ValidationError(
                'User account is disabled.',
                code='authorization'
            )
        attrs['user'] = user
        return attrs


class UserSerializer(serializers.ModelSerializer):
    profile_id = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'date_joined', 'profile_id']
        read_only_fields = fields

    def get_profile_id(self, obj):
        profile = Profile.objects.filter(user=obj).only('id').first()
        return profile.id if profile else None


# ============================================================================
# PROFILE SERIALIZERS
# ============================================================================

class ProfileImageSerializer(serializers.ModelSerializer):

    class Meta:
        model = ProfileImage
        fields = ['id', 'name', 'url', 'size', 'is_primary', 'is_private', 'created_at']
        read_only_fields = fields


class FilterPreferenceSerializer(serializers.ModelSerializer):

    class Meta:
        model = FilterPreference
        fields = ['search_gender', 'looking_for', 'age_from', 'age_to', 'distance', 'page', 'size']
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    """
    Public view of a profile.
    """
    age = serializers.IntegerField(read_only=True)
    is_online = serializers.SerializerMethodField()
    image = serializers.SerializerMethodField()

    class Meta:
        model = Profile
        fields = [
            'id', 'display_name', 'age', 'birthday', 'gender', 'search_gender',
            'looking_for', 'location', 'description', 'height', 'weight',
            'is_deleted', 'is_blocked', 'is_premium', 'is_show_distance',
            'is_invisible', 'is_online', 'last_online', 'image',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_is_online(self, obj):
        return obj.is_online()

    def get_image(self, obj):
        """URL of the first public image, if any."""
        image = ProfileImage.objects.public().filter(profile=obj).order_by('id').first()
        return image.url if image else None


class MyProfileSerializer(ProfileSerializer):
    """
    The caller's own profile, including private photos and saved filter.
    """
    session_id = serializers.CharField(read_only=True)
    telegram_id = serializers.IntegerField(read_only=True)
    images = serializers.SerializerMethodField()
    filter = serializers.SerializerMethodField()

    class Meta(ProfileSerializer.Meta):
        fields = ProfileSerializer.Meta.fields + ['session_id', 'telegram_id', 'images', 'filter']
        read_only_fields = fields

    def get_images(self, obj):
        images = ProfileImage.objects.active().filter(profile=obj).order_by('id')
        return ProfileImageSerializer(images, many=True).data

    def get_filter(self, obj):
        preference = FilterPreference.objects.filter(profile=obj).first()
        return FilterPreferenceSerializer(preference).data if preference else None


class ProfileWriteSerializer(serializers.ModelSerializer):
    """
    Write serializer for create and partial update.

    ``latitude``/``longitude`` are optional; when given they upsert the
    profile's Navigator and surface in ``validated_data['point']``.
    """
    latitude = serializers.CharField(write_only=True, required=False, allow_blank=True)
    longitude = serializers.CharField(write_only=True, required=False, allow_blank=True)
    images = serializers.ListField(
        child=serializers.ImageField(),
        write_only=True,
        required=False,
    )

    class Meta:
        model = Profile
        fields = [
            'display_name', 'birthday', 'gender', 'search_gender', 'looking_for',
            'location', 'description', 'height', 'weight',
            'is_show_distance', 'is_invisible',
            'latitude', 'longitude', 'images',
        ]
        extra_kwargs = {
            'birthday': {'required': True, 'allow_null': False},
        }

    def validate(self, attrs):
        attrs['point'] = parse_point(attrs.pop('latitude', None), attrs.pop('longitude', None))
        return attrs


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()
    is_private = serializers.BooleanField(default=False)
