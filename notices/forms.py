from django import forms
from django.utils.translation import gettext_lazy as _

from dashboard.forms import ScopedModelForm
from schools.models import SchoolClass
from .models import Event, Announcement

DATETIME_WIDGET = forms.DateTimeInput(attrs={'type': 'datetime-local'}, format='%Y-%m-%dT%H:%M')


class NoticeForm(ScopedModelForm):
    """Teachers post notices only to the classes they supervise."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['school_class'].empty_label = _('All classes')

    def scope_choices(self, user):
        if user.role == 'teacher':
            self.fields['school_class'].queryset = SchoolClass.objects.filter(supervisor__user=user)


class EventForm(NoticeForm):
    class Meta:
        model = Event
        fields = ['title', 'description', 'start_time', 'end_time', 'school_class']
        widgets = {
            'description': forms.Textarea(attrs={'rows': 3}),
            'start_time': DATETIME_WIDGET,
            'end_time': DATETIME_WIDGET,
        }

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get('start_time')
        end = cleaned_data.get('end_time')
        if start and end and end <= start:
            self.add_error('end_time', _('The end time must be after the start time.'))
        return cleaned_data


class AnnouncementForm(NoticeForm):
    class Meta:
        model = Announcement
        fields = ['title', 'description', 'date', 'school_class']
        widgets = {
            'description': forms.Textarea(attrs={'rows': 3}),
            'date': DATETIME_WIDGET,
        }
