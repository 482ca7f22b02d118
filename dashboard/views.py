import datetime

from django.contrib.auth.decorators import login_required
from django.shortcuts import render
from django.utils import timezone

from accounts.models import User
from analytics.utils import count_students_by_sex, weekly_attendance
from notices.models import Event, Announcement
from schools.models import Teacher, Student, Parent, Lesson
from schools.utils import weekly_schedule


def _selected_date(request):
    try:
        return datetime.date.fromisoformat(request.GET.get('date', ''))
    except ValueError:
        return timezone.localdate()


def _sidebar(request):
    """Event calendar and latest announcements shown on every home page."""
    day = _selected_date(request)
    return {
        'selected_date': day,
        'events': Event.objects.visible_to(request.user).filter(start_time__date=day).order_by('start_time'),
        'announcements': Announcement.objects.visible_to(request.user).select_related('school_class')[:3],
    }


@login_required
def home_view(request):
    """Home page for the signed-in user's role."""
    user = request.user
    context = _sidebar(request)

    if user.role == User.ROLE_ADMIN:
        context.update({
            'counts': {
                'admins': User.objects.filter(role=User.ROLE_ADMIN).count(),
                'teachers': Teacher.objects.count(),
                'students': Student.objects.count(),
                'parents': Parent.objects.count(),
            },
            'sex_split': count_students_by_sex(),
            'attendance_week': weekly_attendance(timezone.localdate()),
        })
        return render(request, 'dashboard/home_admin.html', context)

    if user.role == User.ROLE_TEACHER:
        lessons = Lesson.objects.taught_by(user).select_related('subject', 'school_class')
        context['schedule'] = weekly_schedule(lessons)
        return render(request, 'dashboard/home_teacher.html', context)

    if user.role == User.ROLE_STUDENT:
        student = Student.objects.filter(user=user).select_related('school_class').first()
        lessons = Lesson.objects.none()
        if student is not None:
            lessons = Lesson.objects.filter(school_class=student.school_class).select_related('subject', 'teacher')
        context.update({
            'student': student,
            'schedule': weekly_schedule(lessons),
        })
        return render(request, 'dashboard/home_student.html', context)

    if user.role == User.ROLE_PARENT:
        children = Student.objects.visible_to(user).select_related('school_class')
        context['children'] = [
            (child, weekly_schedule(
                Lesson.objects.filter(school_class=child.school_class).select_related('subject', 'teacher')
            ))
            for child in children
        ]
        return render(request, 'dashboard/home_parent.html', context)

    return render(request, 'dashboard/home_teacher.html', {**context, 'schedule': weekly_schedule([])})
