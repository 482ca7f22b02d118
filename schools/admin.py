from django.contrib import admin

from .models import Grade, SchoolClass, Subject, Teacher, Student, Parent, Lesson


@admin.register(Grade)
class GradeAdmin(admin.ModelAdmin):
    list_display = ['level']


@admin.register(SchoolClass)
class SchoolClassAdmin(admin.ModelAdmin):
    list_display = ['name', 'grade', 'capacity', 'supervisor']
    list_filter = ['grade']
    search_fields = ['name']


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
    list_display = ['name']
    search_fields = ['name']
    filter_horizontal = ['teachers']


class PersonAdmin(admin.ModelAdmin):
    list_display = ['username', 'name', 'surname', 'email', 'phone']
    search_fields = ['username', 'name', 'surname']
    raw_id_fields = ['user']


@admin.register(Teacher)
class TeacherAdmin(PersonAdmin):
    pass


@admin.register(Student)
class StudentAdmin(PersonAdmin):
    list_display = PersonAdmin.list_display + ['school_class', 'grade']
    list_filter = ['grade', 'school_class']


@admin.register(Parent)
class ParentAdmin(PersonAdmin):
    pass


@admin.register(Lesson)
class LessonAdmin(admin.ModelAdmin):
    list_display = ['name', 'day', 'start_time', 'end_time', 'school_class', 'teacher']
    list_filter = ['day', 'school_class']
