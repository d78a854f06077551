# apps/matching/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import DiscoveryViewSet, LikeViewSet, BlockViewSet, ComplaintViewSet, ReviewViewSet

router = DefaultRouter()
router.register(r'discovery', DiscoveryViewSet, basename='discovery')
router.register(r'likes', LikeViewSet, basename='likes')
router.register(r'blocks', BlockViewSet, basename='blocks')
router.register(r'complaints', ComplaintViewSet, basename='complaints')
router.register(r'reviews', ReviewViewSet, basename='reviews')

urlpatterns = [
    path('', include(router.urls)),
]
