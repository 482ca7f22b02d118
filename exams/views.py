from django.contrib.auth.decorators import login_required
from django.db.models import Q
from django.db.models.functions import Coalesce, Lower
from django.shortcuts import render
from django.utils import timezone

from dashboard.listing import ListConfig, clean_filter_values, list_context
from schools.models import SchoolClass, Subject, Teacher
from .models import Exam, Assignment, Result


LESSON_WORK_SEARCH = (
    'title',
    'lesson__subject__name',
    'lesson__school_class__name',
    'lesson__teacher__name',
    'lesson__teacher__surname',
)

LESSON_WORK_FILTERS = {
    'subject': 'lesson__subject',
    'class': 'lesson__school_class',
    'teacher': 'lesson__teacher',
}

EXAM_LIST = ListConfig(
    search_fields=LESSON_WORK_SEARCH,
    filters=LESSON_WORK_FILTERS,
    sort_fields={
        'title': Lower('title'),
        'subject': Lower('lesson__subject__name'),
        'date': 'start_time',
    },
)

ASSIGNMENT_LIST = ListConfig(
    search_fields=LESSON_WORK_SEARCH,
    filters=LESSON_WORK_FILTERS,
    flags={
        'upcoming': lambda: Q(start_date__gt=timezone.now()),
        'overdue': lambda: Q(due_date__lt=timezone.now()),
    },
    sort_fields={
        'title': Lower('title'),
        'subject': Lower('lesson__subject__name'),
        'dueDate': 'due_date',
    },
)


def _either_lesson(lookup):
    """Filter results through the lesson of whichever assessment they belong to."""
    def build(values):
        values = clean_filter_values(Result, f'exam__lesson__{lookup}', values)
        if not values:
            return Q()
        return (
            Q(**{f'exam__lesson__{lookup}__in': values})
            | Q(**{f'assignment__lesson__{lookup}__in': values})
        )
    return build


def _assessment_type(values):
    query = Q()
    if Result.TYPE_EXAM in values:
        query |= Q(exam__isnull=False)
    if Result.TYPE_ASSIGNMENT in values:
        query |= Q(assignment__isnull=False)
    return query if query else Q(pk__in=[])


RESULT_LIST = ListConfig(
    search_fields=('student__name', 'student__surname', 'exam__title', 'assignment__title'),
    filters={
        'subject': _either_lesson('subject'),
        'class': _either_lesson('school_class'),
        'teacher': _either_lesson('teacher'),
        'student': 'student',
        'type': _assessment_type,
    },
    sort_fields={
        'student': Lower('student__name'),
        'title': Lower(Coalesce('exam__title', 'assignment__title')),
        'score': 'score',
        'date': Coalesce('exam__start_time', 'assignment__start_date'),
    },
)


def _filter_choices():
    return {
        'subjects': Subject.objects.all(),
        'classes': SchoolClass.objects.all(),
        'teachers': Teacher.objects.all(),
    }


@login_required
def exam_list_view(request):
    exams = Exam.objects.visible_to(request.user).select_related(
        'lesson__subject', 'lesson__school_class', 'lesson__teacher'
    )
    context = list_context(request, exams, EXAM_LIST)
    context.update(_filter_choices())
    context['table'] = 'exams'
    return render(request, 'exams/exam_list.html', context)


@login_required
def assignment_list_view(request):
    assignments = Assignment.objects.visible_to(request.user).select_related(
        'lesson__subject', 'lesson__school_class', 'lesson__teacher'
    )
    context = list_context(request, assignments, ASSIGNMENT_LIST)
    context.update(_filter_choices())
    context['table'] = 'assignments'
    context['now'] = timezone.now()
    return render(request, 'exams/assignment_list.html', context)


@login_required
def result_list_view(request):
    results = Result.objects.visible_to(request.user).select_related(
        'student', 'exam__lesson__subject', 'exam__lesson__school_class', 'exam__lesson__teacher',
        'assignment__lesson__subject', 'assignment__lesson__school_class', 'assignment__lesson__teacher',
    )
    context = list_context(request, results, RESULT_LIST)
    context.update(_filter_choices())
    context.update({
        'table': 'results',
        'assessment_types': Result.TYPE_CHOICES,
    })
    return render(request, 'exams/result_list.html', context)
