from django.contrib import admin
from .models import Like, Block, Complaint, Review

admin.site.register(Like)
admin.site.register(Block)


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ['id', 'complainant', 'accused', 'created_at']
    list_filter = ['created_at']
    search_fields = ['reason', 'accused__display_name']
    readonly_fields = ['complainant', 'accused', 'reason', 'created_at']

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['id', 'author', 'rating', 'has_edited', 'has_deleted', 'created_at']
    list_filter = ['has_deleted', 'has_edited']
    search_fields = ['message']
