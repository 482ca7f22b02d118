from django.contrib.auth.decorators import login_required
from django.db.models import Q
from django.db.models.functions import Lower
from django.shortcuts import render

from dashboard.listing import ListConfig, list_context
from schools.models import SchoolClass
from .models import Event, Announcement


def _global_only():
    return Q(school_class__isnull=True)


EVENT_LIST = ListConfig(
    search_fields=('title', 'description'),
    filters={'class': 'school_class'},
    flags={'global': _global_only},
    date_field='start_time__date',
    sort_fields={
        'title': Lower('title'),
        'date': 'start_time',
    },
)

ANNOUNCEMENT_LIST = ListConfig(
    search_fields=('title', 'description'),
    filters={'class': 'school_class'},
    flags={'global': _global_only},
    date_field='date__date',
    sort_fields={
        'title': Lower('title'),
        'date': 'date',
    },
)


@login_required
def event_list_view(request):
    events = Event.objects.visible_to(request.user).select_related('school_class')
    context = list_context(request, events, EVENT_LIST)
    context.update({
        'table': 'events',
        'classes': SchoolClass.objects.all(),
    })
    return render(request, 'notices/event_list.html', context)


@login_required
def announcement_list_view(request):
    announcements = Announcement.objects.visible_to(request.user).select_related('school_class')
    context = list_context(request, announcements, ANNOUNCEMENT_LIST)
    context.update({
        'table': 'announcements',
        'classes': SchoolClass.objects.all(),
    })
    return render(request, 'notices/announcement_list.html', context)
