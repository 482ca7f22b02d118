"""
One create/update/delete view for every dashboard table.

``TABLES`` maps the URL slug of a table to its model, form, service
callables and the roles allowed to write it. ``form_view`` looks the table
up, checks the role, runs the service and maps failures back onto the form.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, RestrictedError
from django.http import Http404
from django.shortcuts import render, redirect
from django.utils.translation import gettext as _

from accounts.errors import apply_identity_errors, apply_integrity_error
from accounts.identity import IdentityError
from attendance.forms import AttendanceForm
from attendance.models import Attendance
from exams.forms import ExamForm, AssignmentForm, ResultForm
from exams.models import Exam, Assignment, Result
from exams.services import delete_exam, delete_assignment
from notices.forms import EventForm, AnnouncementForm
from notices.models import Event, Announcement
from schools.forms import (
    SubjectForm, SchoolClassForm, TeacherForm, StudentForm, ParentForm, LessonForm,
)
from schools.models import Subject, SchoolClass, Teacher, Student, Parent, Lesson
from schools.services import (
    save_teacher, save_student, save_parent, credentials_for,
    delete_person, delete_class, delete_lesson,
)
from .errors import DeletionBlocked

logger = logging.getLogger(__name__)

ACTIONS = ('create', 'update', 'delete')

ADMIN_ONLY = ('admin',)
STAFF = ('admin', 'teacher')


def save_form(form):
    return form.save()


def delete_record(instance):
    instance.delete()


@dataclass(frozen=True)
class Table:
    model: type
    form_class: type
    list_url: str
    write_roles: Tuple[str, ...] = ADMIN_ONLY
    create: Callable = save_form
    update: Callable = save_form
    delete: Callable = delete_record
    # (instance, form) -> dict shown once after create
    credentials: Optional[Callable] = None

    @property
    def verbose_name(self):
        return str(self.model._meta.verbose_name).lower()

    @property
    def verbose_name_plural(self):
        return str(self.model._meta.verbose_name_plural).lower()


TABLES = {
    'teachers': Table(
        Teacher, TeacherForm, 'schools:teachers',
        create=save_teacher, update=save_teacher, delete=delete_person,
        credentials=credentials_for,
    ),
    'students': Table(
        Student, StudentForm, 'schools:students',
        create=save_student, update=save_student, delete=delete_person,
        credentials=credentials_for,
    ),
    'parents': Table(
        Parent, ParentForm, 'schools:parents',
        create=save_parent, update=save_parent, delete=delete_person,
        credentials=credentials_for,
    ),
    'subjects': Table(Subject, SubjectForm, 'schools:subjects'),
    'classes': Table(SchoolClass, SchoolClassForm, 'schools:classes', delete=delete_class),
    'lessons': Table(Lesson, LessonForm, 'schools:lessons', write_roles=STAFF, delete=delete_lesson),
    'exams': Table(Exam, ExamForm, 'exams:exams', write_roles=STAFF, delete=delete_exam),
    'assignments': Table(
        Assignment, AssignmentForm, 'exams:assignments', write_roles=STAFF, delete=delete_assignment,
    ),
    'results': Table(Result, ResultForm, 'exams:results', write_roles=STAFF),
    'attendance': Table(Attendance, AttendanceForm, 'attendance:list', write_roles=STAFF),
    'events': Table(Event, EventForm, 'notices:events', write_roles=STAFF),
    'announcements': Table(Announcement, AnnouncementForm, 'notices:announcements', write_roles=STAFF),
}


def _run(request, entry, form, service):
    """
    Run a create/update service for a valid form. Returns the saved object,
    or None when a failure was mapped onto the form.
    """
    try:
        with transaction.atomic():
            return service(form)
    except IdentityError as exc:
        logger.warning('Identity provisioning failed for %s: %s', entry.verbose_name, exc)
        messages.error(request, apply_identity_errors(form, exc.issues))
    except IntegrityError as exc:
        logger.warning('Integrity error saving %s: %s', entry.verbose_name, exc)
        messages.error(request, apply_integrity_error(form, exc))
    except ValidationError as exc:
        form.add_error(None, exc)
    return None


def _delete(request, table, entry, instance):
    if request.method != 'POST':
        return render(request, 'dashboard/confirm_delete.html', {
            'table': table,
            'entry': entry,
            'object': instance,
            'list_url': entry.list_url,
        })

    try:
        with transaction.atomic():
            entry.delete(instance)
    except DeletionBlocked as exc:
        messages.error(request, exc.message)
    except (ProtectedError, RestrictedError):
        messages.error(request, _(
            'Cannot delete this %(name)s because other records depend on it. '
            'Remove the related records first.'
        ) % {'name': entry.verbose_name})
    else:
        messages.success(request, _('%(name)s has been deleted.') % {
            'name': entry.verbose_name.capitalize(),
        })
    return redirect(entry.list_url)


@login_required
def form_view(request, table, action, pk=None):
    entry = TABLES.get(table)
    if entry is None or action not in ACTIONS:
        raise Http404
    if (action == 'create') != (pk is None):
        raise Http404

    if request.user.role not in entry.write_roles:
        messages.error(request, _('You do not have permission to modify %(name)s.') % {
            'name': entry.verbose_name_plural,
        })
        return redirect(entry.list_url)

    instance = None
    if pk is not None:
        instance = entry.model.objects.visible_to(request.user).filter(pk=pk).first()
        if instance is None:
            messages.error(request, _('The requested %(name)s does not exist.') % {'name': entry.verbose_name})
            return redirect(entry.list_url)

    if action == 'delete':
        return _delete(request, table, entry, instance)

    if request.method == 'POST':
        form = entry.form_class(request.POST, request.FILES, instance=instance, user=request.user)
        if form.is_valid():
            service = entry.create if action == 'create' else entry.update
            obj = _run(request, entry, form, service)
            if obj is not None:
                verb = _('created') if action == 'create' else _('updated')
                messages.success(request, _('%(name)s has been %(verb)s.') % {
                    'name': entry.verbose_name.capitalize(),
                    'verb': verb,
                })
                if action == 'create' and entry.credentials is not None:
                    return render(request, 'dashboard/credentials.html', {
                        'credentials': entry.credentials(obj, form),
                        'entry': entry,
                        'list_url': entry.list_url,
                    })
                return redirect(entry.list_url)
    else:
        form = entry.form_class(instance=instance, user=request.user)

    if action == 'create':
        title = _('Create %(name)s') % {'name': entry.verbose_name}
    else:
        title = _('Update %(name)s') % {'name': entry.verbose_name}

    return render(request, 'dashboard/form.html', {
        'form': form,
        'table': table,
        'action': action,
        'object': instance,
        'title': title,
        'list_url': entry.list_url,
    })
