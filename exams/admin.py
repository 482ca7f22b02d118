from django.contrib import admin

from .models import Exam, Assignment, Result


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ['title', 'lesson', 'start_time', 'end_time']
    search_fields = ['title']


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = ['title', 'lesson', 'start_date', 'due_date']
    search_fields = ['title']


@admin.register(Result)
class ResultAdmin(admin.ModelAdmin):
    list_display = ['student', 'exam', 'assignment', 'score']
    raw_id_fields = ['student']
