import datetime

from django import forms
from django.conf import settings
from django.utils.translation import gettext_lazy as _

from dashboard.forms import ScopedModelForm
from schools.models import Lesson, Student
from .models import Exam, Assignment, Result


DATETIME_WIDGET = forms.DateTimeInput(attrs={'type': 'datetime-local'}, format='%Y-%m-%dT%H:%M')


class LessonChoiceMixin:
    """Teachers may only attach work to lessons they teach."""

    def scope_choices(self, user):
        lessons = Lesson.objects.select_related('school_class', 'subject')
        if user.role == 'teacher':
            lessons = lessons.taught_by(user)
        self.fields['lesson'].queryset = lessons


class ExamForm(LessonChoiceMixin, ScopedModelForm):
    """Form for creating/editing exams."""

    class Meta:
        model = Exam
        fields = ['title', 'start_time', 'end_time', 'lesson']
        widgets = {
            'start_time': DATETIME_WIDGET,
            'end_time': DATETIME_WIDGET,
        }

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get('start_time')
        end = cleaned_data.get('end_time')
        lesson = cleaned_data.get('lesson')

        if not (start and end):
            return cleaned_data

        if end <= start:
            self.add_error('end_time', _('The end time must be after the start time.'))
            return cleaned_data

        max_hours = settings.CAMPUSBOARD['MAX_EXAM_HOURS']
        if end - start > datetime.timedelta(hours=max_hours):
            self.add_error('end_time', _('The exam duration must not exceed %(hours)d hours.') % {
                'hours': max_hours,
            })
            return cleaned_data

        if lesson:
            clashes = Exam.objects.filter(
                lesson__school_class=lesson.school_class_id,
                start_time__lt=end,
                end_time__gt=start,
            )
            if self.instance.pk:
                clashes = clashes.exclude(pk=self.instance.pk)
            if clashes.exists():
                self.add_error(None, _('The class %(name)s already has an exam scheduled at that time.') % {
                    'name': lesson.school_class.name,
                })

        return cleaned_data


class AssignmentForm(LessonChoiceMixin, ScopedModelForm):
    """Form for creating/editing assignments."""

    class Meta:
        model = Assignment
        fields = ['title', 'start_date', 'due_date', 'lesson']
        widgets = {
            'start_date': DATETIME_WIDGET,
            'due_date': DATETIME_WIDGET,
        }

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get('start_date')
        due = cleaned_data.get('due_date')

        if start and due:
            min_days = settings.CAMPUSBOARD['MIN_ASSIGNMENT_DAYS']
            max_days = settings.CAMPUSBOARD['MAX_ASSIGNMENT_DAYS']
            if due - start < datetime.timedelta(days=min_days):
                self.add_error('due_date', _('The due date must be at least %(days)d day after the start date.') % {
                    'days': min_days,
                })
            elif due - start > datetime.timedelta(days=max_days):
                self.add_error('due_date', _('The due date cannot be more than %(days)d days after the start date.') % {
                    'days': max_days,
                })

        return cleaned_data


class ResultForm(ScopedModelForm):
    """
    A result points at either an exam or an assignment, chosen with
    ``assessment_type`` plus ``assessment_id``.
    """

    assessment_type = forms.ChoiceField(
        label=_('Assessment type'),
        choices=[('', '---------')] + Result.TYPE_CHOICES,
    )
    assessment_id = forms.IntegerField(
        label=_('Assessment'),
        widget=forms.Select(),
    )

    class Meta:
        model = Result
        fields = ['score', 'student']
        widgets = {
            'score': forms.NumberInput(attrs={'min': 0, 'max': 100}),
        }

    def __init__(self, *args, **kwargs):
        self.exams = Exam.objects.all()
        self.assignments = Assignment.objects.all()
        super().__init__(*args, **kwargs)
        self.fields['assessment_type'].error_messages['invalid_choice'] = _(
            'You must select a valid assessment type.'
        )
        if not self.is_create:
            self.fields['assessment_type'].initial = self.instance.assessment_type
            self.fields['assessment_id'].initial = self.instance.exam_id or self.instance.assignment_id
        self._set_assessment_choices()

    def scope_choices(self, user):
        students = Student.objects.select_related('school_class')
        if user.role == 'teacher':
            students = students.filter(school_class__supervisor__user=user)
            self.exams = self.exams.filter(lesson__teacher__user=user)
            self.assignments = self.assignments.filter(lesson__teacher__user=user)
        elif user.role == 'parent':
            students = students.filter(parent__user=user)
        self.fields['student'].queryset = students

    def _set_assessment_choices(self):
        self.fields['assessment_id'].widget.choices = [
            ('', '---------'),
            (_('Exams'), [(exam.pk, exam.title) for exam in self.exams]),
            (_('Assignments'), [(assignment.pk, assignment.title) for assignment in self.assignments]),
        ]

    def clean(self):
        cleaned_data = super().clean()
        assessment_type = cleaned_data.get('assessment_type')
        assessment_id = cleaned_data.get('assessment_id')
        student = cleaned_data.get('student')

        if assessment_type not in (Result.TYPE_EXAM, Result.TYPE_ASSIGNMENT):
            if 'assessment_type' not in self.errors:
                self.add_error('assessment_type', _('You must select a valid assessment type.'))
            return cleaned_data
        if assessment_id is None:
            return cleaned_data

        if assessment_type == Result.TYPE_EXAM:
            exam = self.exams.filter(pk=assessment_id).first()
            if exam is None:
                self.add_error('assessment_id', _('The selected exam does not exist.'))
                return cleaned_data
            self.instance.exam, self.instance.assignment = exam, None
            duplicates = Result.objects.filter(exam=exam)
            message = _('This student already has a result for this exam.')
        else:
            assignment = self.assignments.filter(pk=assessment_id).first()
            if assignment is None:
                self.add_error('assessment_id', _('The selected assignment does not exist.'))
                return cleaned_data
            self.instance.exam, self.instance.assignment = None, assignment
            duplicates = Result.objects.filter(assignment=assignment)
            message = _('This student already has a result for this assignment.')

        if student:
            duplicates = duplicates.filter(student=student)
            if self.instance.pk:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                self.add_error('student', message)

        return cleaned_data
