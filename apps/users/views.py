"""
User Views
===========
Handles:
- Authentication (register, login, logout, me)
- Profile lifecycle (create, me, update, soft delete)
- Public and detail views of other profiles
- Photo upload and removal
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.authtoken.models import Token
from rest_framework.parsers import MultiPartParser, FormParser, JSONParser
from django.contrib.auth import login, logout

from apps.common.exceptions import NotFoundError, ValidationError
from apps.common.geo import parse_point
from apps.matching.apps import get_trust_graph
from apps.matching.serializers import LikeSerializer
from .identity import identity_lookup, resolve_profile
from .models import FilterPreference, ProfileImage
from .serializers import (
    UserRegistrationSerializer, UserLoginSerializer, UserSerializer,
    ProfileSerializer, MyProfileSerializer, ProfileWriteSerializer,
    ProfileImageSerializer, FilterPreferenceSerializer, ImageUploadSerializer,
)
from .services import NavigatorStore, ProfileService


# ============================================================================
# AUTH VIEWSET
# ============================================================================
class AuthViewSet(viewsets.GenericViewSet):
    """
    ViewSet for authentication operations.

    Endpoints:
    - POST /api/auth/register/ - Register new account
    - POST /api/auth/login/ - Login
    - POST /api/auth/logout/ - Logout
    - GET /api/auth/me/ - Current account
    """

    permission_classes = [AllowAny]
    serializer_class = UserLoginSerializer

    def get_serializer_class(self):
        if self.action == 'register':
            return UserRegistrationSerializer
        elif self.action == 'login':
            return UserLoginSerializer
        return UserSerializer

    @action(detail=False, methods=['post'])
    def register(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        token, _ = Token.objects.get_or_create(user=user)
        login(request, user)

        return Response({
            'message': 'User registered successfully.',
            'user': UserSerializer(user).data,
            'token': token.key
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def login(self, request):
        serializer = self.get_serializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user']
        token, _ = Token.objects.get_or_create(user=user)
        login(request, user)

        return Response({
            'message': 'User logged in successfully.',
            'user': UserSerializer(user).data,
            'token': token.key
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'], permission_classes=[IsAuthenticated])
    def logout(self, request):
        Token.objects.filter(user=request.user).delete()
        logout(request)
        return Response({'message': 'User logged out successfully.'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated])
    def me(self, request):
        return Response({'user': UserSerializer(request.user).data}, status=status.HTTP_200_OK)


# ============================================================================
# PROFILE VIEWSET
# ============================================================================
class ProfileViewSet(viewsets.GenericViewSet):
    """
    Profile endpoints. The caller is resolved from auth, ``X-Session-Id``
    or ``X-Telegram-Id``.

    - POST  /api/profiles/                         - create caller's profile
    - GET   /api/profiles/me/                      - caller's profile
    - PATCH /api/profiles/me/                      - partial update
    - POST  /api/profiles/me/delete/               - soft delete
    - POST  /api/profiles/me/images/               - upload photo
    - POST  /api/profiles/images/{id}/delete/      - remove photo
    - GET   /api/profiles/{id}/                    - public profile
    - GET   /api/profiles/{id}/detail/             - profile as seen by caller
    """
    serializer_class = ProfileSerializer
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    lookup_value_regex = r'\d+'

    def create(self, request):
        identity = identity_lookup(request)
        if identity is None:
            raise ValidationError('Log in or send X-Session-Id or X-Telegram-Id to create a profile.')

        serializer = ProfileWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        point = data.pop('point')
        images = data.pop('images', [])

        profile = ProfileService.create_profile(identity, data, point=point, images=images)
        return Response(MyProfileSerializer(profile).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get', 'patch'])
    def me(self, request):
        profile = resolve_profile(request)

        if request.method == 'GET':
            point = parse_point(
                request.query_params.get('latitude'),
                request.query_params.get('longitude'),
            )
            if point is not None:
                NavigatorStore.upsert(profile, point)
            return Response(MyProfileSerializer(profile).data)

        serializer = ProfileWriteSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        point = data.pop('point')
        data.pop('images', None)

        profile = ProfileService.update_profile(profile, data, point=point)
        return Response(MyProfileSerializer(profile).data)

    @action(detail=False, methods=['post'], url_path='me/delete')
    def delete_me(self, request):
        profile = resolve_profile(request, touch=False)
        profile = ProfileService.soft_delete(profile)
        return Response({'message': 'Profile deleted.', 'id': profile.pk})

    @action(detail=False, methods=['post'], url_path='me/images')
    def upload_image(self, request):
        profile = resolve_profile(request)
        serializer = ImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        image = ProfileService.add_image(
            profile,
            serializer.validated_data['image'],
            is_private=serializer.validated_data['is_private'],
        )
        return Response(ProfileImageSerializer(image).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path=r'images/(?P<image_id>\d+)/delete')
    def delete_image(self, request, image_id=None):
        profile = resolve_profile(request)
        image = ProfileService.delete_image(profile, int(image_id))
        return Response({'message': 'Image deleted.', 'id': image.pk})

    def retrieve(self, request, pk=None):
        profile = ProfileService.get_profile(pk)
        return Response(ProfileSerializer(profile).data)

    @action(detail=True, methods=['get'], url_path='detail')
    def profile_detail(self, request, pk=None):
        """
        Another profile as the caller sees it: public photos, like state
        and distance in meters.
        """
        viewer = resolve_profile(request)
        point = parse_point(
            request.query_params.get('latitude'),
            request.query_params.get('longitude'),
        )
        if point is not None:
            NavigatorStore.upsert(viewer, point)

        target = ProfileService.get_profile(pk)
        trust_graph = get_trust_graph()
        if target.pk != viewer.pk and not trust_graph.is_visible_to(viewer, target):
            raise NotFoundError('Profile not found.')

        like = trust_graph.like_status_for(viewer, target)
        preference = FilterPreference.objects.filter(profile=target).first()
        images = ProfileImage.objects.public().filter(profile=target).order_by('id')

        data = ProfileSerializer(target).data
        data.update({
            'images': ProfileImageSerializer(images, many=True).data,
            'filter': FilterPreferenceSerializer(preference).data if preference else None,
            'like': LikeSerializer(like).data if like else None,
            'distance': ProfileService.distance_between(viewer, target),
        })
        return Response(data)
