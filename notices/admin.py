from django.contrib import admin

from .models import Event, Announcement


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ['title', 'start_time', 'end_time', 'school_class']
    search_fields = ['title']


@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ['title', 'date', 'school_class']
    search_fields = ['title']
