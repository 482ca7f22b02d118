from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.db.models.functions import Lower
from django.shortcuts import render, redirect
from django.utils.translation import gettext_lazy as _

from accounts.decorators import staff_required
from dashboard.listing import ListConfig, list_context
from schools.models import Lesson, SchoolClass
from .forms import TakeAttendanceForm
from .models import Attendance
from .services import take_attendance


def _status(values):
    query = Q()
    if 'present' in values:
        query |= Q(present=True)
    if 'absent' in values:
        query |= Q(present=False)
    return query if query else Q(pk__in=[])


ATTENDANCE_LIST = ListConfig(
    search_fields=('student__name', 'student__surname', 'lesson__name'),
    filters={
        'lesson': 'lesson',
        'class': 'lesson__school_class',
        'student': 'student',
        'status': _status,
    },
    date_field='date',
    sort_fields={
        'student': Lower('student__name'),
        'date': 'date',
    },
)


@login_required
def attendance_list_view(request):
    records = Attendance.objects.visible_to(request.user).select_related(
        'student', 'lesson__school_class', 'lesson__subject'
    )
    context = list_context(request, records, ATTENDANCE_LIST)
    context.update({
        'table': 'attendance',
        'lessons': Lesson.objects.visible_to(request.user).select_related('school_class'),
        'classes': SchoolClass.objects.visible_to(request.user),
    })
    return render(request, 'attendance/attendance_list.html', context)


@login_required
@staff_required
def take_attendance_view(request):
    """
    Attendance sheet for one lesson and day. Pick the lesson and date, then
    tick who was present; saving replaces that day's records.
    """
    source = request.POST if request.method == 'POST' else (request.GET or None)
    form = TakeAttendanceForm(source, user=request.user)
    students = []
    present_ids = set()

    if form.is_bound and form.is_valid():
        lesson = form.cleaned_data['lesson']
        date = form.cleaned_data['date']
        students = list(lesson.school_class.students.order_by('surname', 'name'))

        if request.method == 'POST':
            try:
                roster = {int(pk) for pk in request.POST.getlist('student')}
                present_ids = {int(pk) for pk in request.POST.getlist('present')}
            except ValueError:
                messages.error(request, _('Invalid student selection.'))
            else:
                marks = {pk: pk in present_ids for pk in roster}
                try:
                    records = take_attendance(lesson, date, marks)
                except ValidationError as exc:
                    messages.error(request, ' '.join(exc.messages))
                else:
                    messages.success(request, _('Attendance saved for %(count)d students.') % {
                        'count': len(records),
                    })
                    return redirect('attendance:list')
        else:
            present_ids = set(
                Attendance.objects.filter(lesson=lesson, date=date, present=True)
                .values_list('student_id', flat=True)
            )

    return render(request, 'attendance/take_attendance.html', {
        'form': form,
        'students': students,
        'present_ids': present_ids,
    })
