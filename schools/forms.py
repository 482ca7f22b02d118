from django import forms
from django.utils.translation import gettext_lazy as _

from dashboard.forms import ScopedModelForm
from .models import SchoolClass, Subject, Teacher, Student, Parent, Lesson


class SubjectForm(ScopedModelForm):
    """Form for creating/editing subjects."""

    class Meta:
        model = Subject
        fields = ['name', 'teachers']
        widgets = {
            'name': forms.TextInput(attrs={'placeholder': _('Subject name')}),
            'teachers': forms.SelectMultiple(attrs={'size': 6}),
        }


class SchoolClassForm(ScopedModelForm):
    """Form for creating/editing classes."""

    class Meta:
        model = SchoolClass
        fields = ['name', 'capacity', 'grade', 'supervisor']
        widgets = {
            'name': forms.TextInput(attrs={'placeholder': _('Class name (e.g., 1A)')}),
            'capacity': forms.NumberInput(attrs={'min': 1}),
        }

    def clean_capacity(self):
        capacity = self.cleaned_data.get('capacity')
        if capacity is not None and not self.is_create:
            current = self.instance.students.count()
            if capacity < current:
                raise forms.ValidationError(
                    _('Cannot reduce capacity to %(capacity)d because there are %(count)d students assigned to this class.'),
                    code='capacity_below_students',
                    params={'capacity': capacity, 'count': current},
                )
        return capacity


class PersonForm(ScopedModelForm):
    """
    Shared fields for teachers, students and parents.
    The password is required on create and optional on update; its strength
    is checked when the login account is provisioned.
    """

    password = forms.CharField(
        label=_('Password'),
        required=False,
        strip=False,
        widget=forms.PasswordInput(attrs={'autocomplete': 'new-password'}),
    )

    person_fields = ['username', 'name', 'surname', 'email', 'phone', 'address', 'img']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['username'].widget.attrs.update({
            'placeholder': _('6-digit account number'),
            'inputmode': 'numeric',
            'maxlength': 6,
        })
        if self.is_create:
            self.fields['password'].required = True
        else:
            self.fields['password'].help_text = _('Leave blank to keep the current password.')


class TeacherForm(PersonForm):
    subjects = forms.ModelMultipleChoiceField(
        queryset=Subject.objects.all(),
        required=False,
        label=_('Subjects'),
    )
    classes = forms.ModelMultipleChoiceField(
        queryset=SchoolClass.objects.all(),
        required=False,
        label=_('Supervised classes'),
    )

    class Meta:
        model = Teacher
        fields = PersonForm.person_fields + ['blood_type', 'sex', 'birthday']
        widgets = {
            'birthday': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.is_create:
            self.fields['subjects'].initial = self.instance.subjects.all()
            self.fields['classes'].initial = self.instance.supervised_classes.all()


class StudentForm(PersonForm):
    class Meta:
        model = Student
        fields = PersonForm.person_fields + [
            'blood_type', 'sex', 'birthday', 'grade', 'school_class', 'parent',
        ]
        widgets = {
            'birthday': forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
        }

    def clean_school_class(self):
        school_class = self.cleaned_data.get('school_class')
        if school_class is None:
            return school_class
        moving_in = self.is_create or self.instance.school_class_id != school_class.pk
        if moving_in and school_class.is_full:
            raise forms.ValidationError(
                _('The selected class is already full. Please choose another class.'),
                code='class_full',
            )
        return school_class


class ParentForm(PersonForm):
    class Meta:
        model = Parent
        fields = PersonForm.person_fields


class LessonForm(ScopedModelForm):
    class Meta:
        model = Lesson
        fields = ['name', 'day', 'start_time', 'end_time', 'subject', 'school_class', 'teacher']
        widgets = {
            'start_time': forms.TimeInput(attrs={'type': 'time'}, format='%H:%M'),
            'end_time': forms.TimeInput(attrs={'type': 'time'}, format='%H:%M'),
        }

    def clean(self):
        cleaned_data = super().clean()
        day = cleaned_data.get('day')
        start = cleaned_data.get('start_time')
        end = cleaned_data.get('end_time')
        school_class = cleaned_data.get('school_class')
        teacher = cleaned_data.get('teacher')

        if start and end and end <= start:
            self.add_error('end_time', _('The end time must be after the start time.'))
            return cleaned_data

        if not (day and start and end):
            return cleaned_data

        others = Lesson.objects.overlapping(day, start, end, exclude_pk=self.instance.pk)
        if school_class and others.filter(school_class=school_class).exists():
            self.add_error(None, _('The class %(name)s already has a lesson at that time.') % {
                'name': school_class.name,
            })
        if teacher and others.filter(teacher=teacher).exists():
            self.add_error('teacher', _('The teacher %(name)s already has a lesson at that time.') % {
                'name': teacher.full_name,
            })

        return cleaned_data


class RosterUploadForm(forms.Form):
    """Form for uploading a student roster Excel file."""

    file = forms.FileField(
        label=_('Excel File (.xlsx)'),
        widget=forms.FileInput(attrs={
            'class': 'form-input',
            'accept': '.xlsx',
        }),
        help_text=_('Columns: account number, name, surname, class, grade, sex, birthday, blood type')
    )
    update_existing = forms.BooleanField(
        required=False,
        initial=True,
        label=_('Update existing students'),
        help_text=_('If unchecked, rows whose account number already exists are skipped.')
    )

    def clean_file(self):
        file = self.cleaned_data.get('file')
        if file:
            if not file.name.lower().endswith('.xlsx'):
                raise forms.ValidationError(_('Only Excel files (.xlsx) are allowed.'))
            if file.size > 10 * 1024 * 1024:
                raise forms.ValidationError(_('File size must be less than 10MB.'))
        return file
