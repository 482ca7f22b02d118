from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db.models import Count, Q
from django.db.models.functions import Lower
from django.shortcuts import render, redirect, get_object_or_404
from django.utils.translation import gettext_lazy as _

from accounts.decorators import admin_required, staff_required, role_required
from attendance.models import Attendance
from dashboard.listing import ListConfig, list_context
from .forms import RosterUploadForm
from .models import Grade, SchoolClass, Subject, Teacher, Student, Parent, Lesson
from .services import import_roster
from .utils import parse_roster_excel, weekly_schedule


TEACHER_LIST = ListConfig(
    search_fields=('name', 'surname', 'username'),
    filters={
        'subject': 'subjects',
        'class': 'supervised_classes',
    },
    sort_fields={'name': Lower('name')},
)

STUDENT_LIST = ListConfig(
    search_fields=('name', 'surname', 'username'),
    filters={
        'grade': 'grade',
        'class': 'school_class',
    },
    sort_fields={'name': Lower('name')},
)

PARENT_LIST = ListConfig(
    search_fields=('name', 'surname'),
    sort_fields={'name': Lower('name')},
)

SUBJECT_LIST = ListConfig(
    search_fields=('name',),
    sort_fields={'name': Lower('name')},
)

CLASS_LIST = ListConfig(
    search_fields=('name',),
    filters={
        'grade': 'grade',
        'supervisor': 'supervisor',
    },
    sort_fields={'name': Lower('name')},
)

LESSON_LIST = ListConfig(
    search_fields=('name', 'subject__name', 'school_class__name'),
    filters={
        'subject': 'subject',
        'class': 'school_class',
        'teacher': 'teacher',
        'day': 'day',
    },
    sort_fields={
        'name': Lower('name'),
        'subject': Lower('subject__name'),
        'day': 'day',
    },
)


# ============ People ============

@login_required
@staff_required
def teacher_list_view(request):
    """List teachers with their subjects and classes."""
    teachers = Teacher.objects.visible_to(request.user).prefetch_related(
        'subjects', 'supervised_classes'
    )
    context = list_context(request, teachers, TEACHER_LIST)
    context.update({
        'table': 'teachers',
        'subjects': Subject.objects.all(),
        'classes': SchoolClass.objects.all(),
    })
    return render(request, 'schools/teacher_list.html', context)


@login_required
@staff_required
def teacher_detail_view(request, pk):
    """Teacher profile with weekly schedule."""
    teacher = get_object_or_404(Teacher.objects.visible_to(request.user), pk=pk)
    lessons = teacher.lessons.select_related('subject', 'school_class')

    return render(request, 'schools/teacher_detail.html', {
        'teacher': teacher,
        'lesson_count': lessons.count(),
        'subject_count': teacher.subjects.count(),
        'class_count': teacher.supervised_classes.count(),
        'schedule': weekly_schedule(lessons),
    })


@login_required
@staff_required
def student_list_view(request):
    students = Student.objects.visible_to(request.user).select_related('school_class', 'grade', 'parent')
    context = list_context(request, students, STUDENT_LIST)
    context.update({
        'table': 'students',
        'grades': Grade.objects.all(),
        'classes': SchoolClass.objects.all(),
    })
    return render(request, 'schools/student_list.html', context)


@login_required
@role_required(['admin', 'teacher', 'student', 'parent'])
def student_detail_view(request, pk):
    """Student profile with class schedule and attendance rate."""
    student = get_object_or_404(
        Student.objects.visible_to(request.user).select_related('school_class', 'grade'),
        pk=pk
    )
    lessons = Lesson.objects.filter(school_class=student.school_class).select_related('subject', 'teacher')

    records = Attendance.objects.filter(student=student).aggregate(
        total=Count('id'),
        present=Count('id', filter=Q(present=True)),
    )
    attendance_pct = None
    if records['total']:
        attendance_pct = round(records['present'] * 100 / records['total'])

    return render(request, 'schools/student_detail.html', {
        'student': student,
        'lesson_count': lessons.count(),
        'attendance_pct': attendance_pct,
        'schedule': weekly_schedule(lessons),
    })


@login_required
@staff_required
def parent_list_view(request):
    parents = Parent.objects.visible_to(request.user).prefetch_related('students')
    context = list_context(request, parents, PARENT_LIST)
    context['table'] = 'parents'
    return render(request, 'schools/parent_list.html', context)


# ============ Subjects / Classes / Lessons ============

@login_required
@admin_required
def subject_list_view(request):
    subjects = Subject.objects.visible_to(request.user).prefetch_related('teachers')
    context = list_context(request, subjects, SUBJECT_LIST)
    context['table'] = 'subjects'
    return render(request, 'schools/subject_list.html', context)


@login_required
@staff_required
def class_list_view(request):
    classes = SchoolClass.objects.visible_to(request.user).select_related(
        'grade', 'supervisor'
    ).annotate(students_total=Count('students'))
    context = list_context(request, classes, CLASS_LIST)
    context.update({
        'table': 'classes',
        'grades': Grade.objects.all(),
        'supervisors': Teacher.objects.all(),
    })
    return render(request, 'schools/class_list.html', context)


@login_required
@staff_required
def lesson_list_view(request):
    lessons = Lesson.objects.visible_to(request.user).select_related('subject', 'school_class', 'teacher')
    context = list_context(request, lessons, LESSON_LIST)
    context.update({
        'table': 'lessons',
        'subjects': Subject.objects.all(),
        'classes': SchoolClass.objects.all(),
        'teachers': Teacher.objects.all(),
        'days': Lesson.Day.choices,
    })
    return render(request, 'schools/lesson_list.html', context)


# ============ Roster import ============

@login_required
@admin_required
def roster_upload_view(request):
    """Upload a student roster from an Excel file."""
    if request.method == 'POST':
        form = RosterUploadForm(request.POST, request.FILES)
        if form.is_valid():
            try:
                rows, problems = parse_roster_excel(form.cleaned_data['file'])
            except ValueError as e:
                messages.error(request, str(e))
                return render(request, 'schools/roster_upload.html', {'form': form})

            if not rows:
                messages.error(request, _('No valid student data found in the file.'))
                return render(request, 'schools/roster_upload.html', {'form': form, 'problems': problems})

            report = import_roster(rows, update_existing=form.cleaned_data['update_existing'])
            report['skipped'] += len(problems)
            problems = problems + report['errors']

            messages.success(
                request,
                _('Import complete: %(created)d students created, %(updated)d updated, %(skipped)d skipped.') % report
            )
            if not problems:
                return redirect('schools:students')
            return render(request, 'schools/roster_upload.html', {
                'form': RosterUploadForm(),
                'problems': problems,
            })
    else:
        form = RosterUploadForm()

    return render(request, 'schools/roster_upload.html', {'form': form})
