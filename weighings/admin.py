from django.contrib import admin

from .models import Weighing


@admin.register(Weighing)
class WeighingAdmin(admin.ModelAdmin):
    list_display = ("animal_id", "recorded_at", "weight_kg", "created_at")
    list_filter = ("recorded_at",)
    search_fields = ("animal_id",)
    ordering = ("animal_id", "recorded_at")
    readonly_fields = ("identifier", "created_at")
