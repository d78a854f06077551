"""
Discovery, Trust Graph & Review Views
======================================
Views parse input with serializers, resolve the acting profile and hand
off to the service layer. Domain errors propagate to the project
exception handler.
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.common.exceptions import ValidationError
from apps.common.pagination import StandardResultsSetPagination
from apps.users.identity import resolve_profile
from .apps import get_trust_graph
from .serializers import (
    DiscoveryQuerySerializer, CandidateSerializer,
    LikeSerializer, BlockSerializer, ComplaintSerializer, ReviewSerializer,
)
from .services import DiscoveryService, ReviewService


# ============================================================================
# DISCOVERY VIEWSET
# ============================================================================
class DiscoveryViewSet(viewsets.ViewSet):
    """
    GET /api/discovery/ - one page of nearby candidates

    Query parameters override and update the saved filter.
    """

    def list(self, request):
        viewer = resolve_profile(request)

        query = DiscoveryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = dict(query.validated_data)
        point = params.pop('point')

        result = DiscoveryService.discover(viewer, overrides=params, point=point)

        return Response({
            'pagination': result['pagination'],
            'content': CandidateSerializer(result['content'], many=True).data,
        })


# ============================================================================
# LIKE VIEWSET
# ============================================================================
class LikeViewSet(viewsets.GenericViewSet):
    """
    POST /api/likes/              - like a profile
    POST /api/likes/{id}/unlike/  - withdraw a like
    """
    serializer_class = LikeSerializer
    lookup_value_regex = r'\d+'

    def create(self, request):
        liker = resolve_profile(request)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        edge = get_trust_graph().like(liker, serializer.validated_data['liked_id'])
        return Response(LikeSerializer(edge).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def unlike(self, request, pk=None):
        actor = resolve_profile(request)
        edge = get_trust_graph().unlike(pk, actor)
        return Response(LikeSerializer(edge).data)


# ============================================================================
# BLOCK VIEWSET
# ============================================================================
class BlockViewSet(viewsets.GenericViewSet):
    """
    POST /api/blocks/ - block a profile (both directions)
    """
    serializer_class = BlockSerializer

    def create(self, request):
        blocker = resolve_profile(request)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        edge = get_trust_graph().block(blocker, serializer.validated_data['blocked_id'])
        return Response(BlockSerializer(edge).data, status=status.HTTP_201_CREATED)


# ============================================================================
# COMPLAINT VIEWSET
# ============================================================================
class ComplaintViewSet(viewsets.GenericViewSet):
    """
    POST /api/complaints/ - complain about a profile
    """
    serializer_class = ComplaintSerializer

    def create(self, request):
        complainant = resolve_profile(request)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        complaint = get_trust_graph().file_complaint(
            complainant,
            serializer.validated_data['accused_id'],
            serializer.validated_data.get('reason', ''),
        )
        return Response(ComplaintSerializer(complaint).data, status=status.HTTP_201_CREATED)


# ============================================================================
# REVIEW VIEWSET
# ============================================================================
class ReviewViewSet(viewsets.GenericViewSet):
    """
    GET    /api/reviews/?profile_id=&search=  - paginated live reviews
    GET    /api/reviews/{id}/
    POST   /api/reviews/
    PATCH  /api/reviews/{id}/                  - author only
    DELETE /api/reviews/{id}/                  - soft delete, author only
    """
    serializer_class = ReviewSerializer
    lookup_value_regex = r'\d+'
    pagination_class = StandardResultsSetPagination

    def get_queryset(self):
        profile_id = self.request.query_params.get('profile_id')
        if profile_id:
            try:
                profile_id = int(profile_id)
            except ValueError:
                raise ValidationError('profile_id must be an integer.')
        else:
            profile_id = None
        return ReviewService.list_reviews(
            profile_id=profile_id,
            search=self.request.query_params.get('search'),
        )

    def list(self, request):
        page = self.paginate_queryset(self.get_queryset())
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):
        review = ReviewService.get_review(pk)
        return Response(self.get_serializer(review).data)

    def create(self, request):
        author = resolve_profile(request)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = ReviewService.add_review(author, **serializer.validated_data)
        return Response(self.get_serializer(review).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        author = resolve_profile(request)
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        review = ReviewService.update_review(pk, author, **serializer.validated_data)
        return Response(self.get_serializer(review).data)

    def destroy(self, request, pk=None):
        author = resolve_profile(request)
        review = ReviewService.delete_review(pk, author)
        return Response(self.get_serializer(review).data)
