from django import forms
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from dashboard.forms import ScopedModelForm
from schools.models import Lesson, Student
from .models import Attendance


def _scoped_lessons(user):
    lessons = Lesson.objects.select_related('school_class', 'subject')
    if user is not None and user.role == 'teacher':
        lessons = lessons.taught_by(user)
    return lessons


class AttendanceForm(ScopedModelForm):
    class Meta:
        model = Attendance
        fields = ['date', 'present', 'student', 'lesson']
        widgets = {
            'date': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
        }

    def scope_choices(self, user):
        lessons = _scoped_lessons(user)
        self.fields['lesson'].queryset = lessons
        students = Student.objects.select_related('school_class')
        if user.role == 'teacher':
            students = students.filter(school_class__lessons__in=lessons).distinct()
        self.fields['student'].queryset = students

    def clean(self):
        cleaned_data = super().clean()
        student = cleaned_data.get('student')
        lesson = cleaned_data.get('lesson')
        date = cleaned_data.get('date')

        if student and lesson and student.school_class_id != lesson.school_class_id:
            self.add_error('student', _('The student does not belong to the class of this lesson.'))
            return cleaned_data

        if student and lesson and date:
            duplicates = Attendance.objects.filter(student=student, lesson=lesson, date=date)
            if self.instance.pk:
                duplicates = duplicates.exclude(pk=self.instance.pk)
            if duplicates.exists():
                self.add_error(None, _('An attendance record already exists for this student, lesson and date.'))

        return cleaned_data


class TakeAttendanceForm(forms.Form):
    """Picks the lesson and day for the bulk attendance sheet."""

    lesson = forms.ModelChoiceField(
        queryset=Lesson.objects.none(),
        label=_('Lesson'),
        widget=forms.Select(attrs={'class': 'form-select'})
    )
    date = forms.DateField(
        label=_('Date'),
        initial=timezone.localdate,
        widget=forms.DateInput(attrs={'class': 'form-input', 'type': 'date'}, format='%Y-%m-%d')
    )

    def __init__(self, *args, user=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['lesson'].queryset = _scoped_lessons(user)
