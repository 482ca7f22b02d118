from django.contrib import admin

from .models import Attendance


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ['date', 'student', 'lesson', 'present']
    list_filter = ['present', 'date']
    raw_id_fields = ['student']
