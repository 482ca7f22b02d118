"""
Write operations for people, classes, subjects and lessons.

Forms do the field validation; these functions persist the result. People
get a login account provisioned through ``accounts.identity`` inside the
same transaction as the profile row, so a failure on either side leaves
nothing behind.
"""
import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext as _

from accounts.errors import field_label
from accounts.identity import IdentityError, create_login, update_login, delete_login
from accounts.models import User
from dashboard.errors import DeletionBlocked
from .models import Grade, SchoolClass, Student

logger = logging.getLogger(__name__)


def _sync_login(person, role, data):
    password = data.get('password') or None
    if person.user_id:
        update_login(
            person.user,
            account_number=data['username'],
            first_name=data['name'],
            last_name=data['surname'],
            password=password,
            email=data.get('email'),
        )
    elif password:
        person.user = create_login(
            role,
            account_number=data['username'],
            password=password,
            first_name=data['name'],
            last_name=data['surname'],
            email=data.get('email'),
        )


def _save_person(form, role):
    person = form.save(commit=False)
    _sync_login(person, role, form.cleaned_data)
    person.save()
    form.save_m2m()
    return person


@transaction.atomic
def save_teacher(form):
    """Create or update a teacher, replacing their subjects and supervised classes."""
    teacher = _save_person(form, User.ROLE_TEACHER)
    data = form.cleaned_data

    teacher.subjects.set(data.get('subjects') or [])

    classes = data.get('classes') or []
    SchoolClass.objects.filter(supervisor=teacher).exclude(
        pk__in=[c.pk for c in classes]
    ).update(supervisor=None)
    SchoolClass.objects.filter(pk__in=[c.pk for c in classes]).update(supervisor=teacher)

    logger.info('Saved teacher %s', teacher.username)
    return teacher


@transaction.atomic
def save_student(form):
    student = _save_person(form, User.ROLE_STUDENT)
    logger.info('Saved student %s', student.username)
    return student


@transaction.atomic
def save_parent(form):
    parent = _save_person(form, User.ROLE_PARENT)
    logger.info('Saved parent %s', parent.username)
    return parent


def credentials_for(person, form):
    """Details shown once after a person is created."""
    data = form.cleaned_data
    return {
        'name': person.name,
        'surname': person.surname,
        'username': person.username,
        'password': data.get('password', ''),
        'email': person.email or '',
    }


def delete_person(person):
    """
    Delete the profile, then the login. A login that cannot be removed is
    logged and left behind; the profile is already gone.
    """
    user = person.user
    person.delete()
    if user is not None and not delete_login(user):
        logger.warning('Profile %s deleted but its login %s was kept', person.username, user.username)


def delete_class(school_class):
    count = school_class.students.count()
    if count:
        raise DeletionBlocked(
            _('Cannot delete this class because it has %(count)d students assigned. '
              'Reassign or delete the students first.') % {'count': count}
        )
    school_class.delete()


def delete_lesson(lesson):
    checks = [
        (lesson.exams.count(),
         _('Cannot delete this lesson because it has %(count)d exams. Delete the exams first.')),
        (lesson.assignments.count(),
         _('Cannot delete this lesson because it has %(count)d assignments. Delete the assignments first.')),
        (lesson.attendances.count(),
         _('Cannot delete this lesson because it has %(count)d attendance records. '
           'Delete the attendance records first.')),
    ]
    for count, message in checks:
        if count:
            raise DeletionBlocked(message % {'count': count})
    lesson.delete()


def import_roster(rows, update_existing=True):
    """
    Create or update students from parsed roster rows.

    Each row needs a known class; grades are created on demand. New students
    get the configured default password. Returns created/updated/skipped
    counts plus per-row problems.
    """
    default_password = settings.CAMPUSBOARD['DEFAULT_STUDENT_PASSWORD']
    report = {'created': 0, 'updated': 0, 'skipped': 0, 'errors': []}

    for row in rows:
        school_class = SchoolClass.objects.filter(name__iexact=row['class']).first()
        if school_class is None:
            report['skipped'] += 1
            report['errors'].append(_('Row %(row)d: unknown class "%(name)s".') % {
                'row': row['row'], 'name': row['class'],
            })
            continue

        existing = Student.objects.filter(username=row['username']).first()
        if existing and not update_existing:
            report['skipped'] += 1
            continue
        moving_in = existing is None or existing.school_class_id != school_class.pk
        if moving_in and school_class.is_full:
            report['skipped'] += 1
            report['errors'].append(_('Row %(row)d: class %(name)s is full.') % {
                'row': row['row'], 'name': school_class.name,
            })
            continue

        grade = school_class.grade
        if row.get('grade'):
            grade, _created = Grade.objects.get_or_create(level=row['grade'])

        fields = {
            'name': row['name'],
            'surname': row['surname'],
            'school_class': school_class,
            'grade': grade,
            'sex': row['sex'],
            'birthday': row['birthday'],
            'blood_type': row['blood_type'],
        }
        if row.get('address'):
            fields['address'] = row['address']

        if existing:
            student = existing
            for key, value in fields.items():
                setattr(student, key, value)
        else:
            student = Student(username=row['username'], **fields)

        # rosters without an address column leave it empty on new students
        exclude = ['user'] if student.address else ['user', 'address']
        try:
            student.full_clean(exclude=exclude)
        except ValidationError as exc:
            report['skipped'] += 1
            problems = '; '.join(
                f'{field_label(name)}: {" ".join(messages)}' for name, messages in exc.message_dict.items()
            )
            report['errors'].append(_('Row %(row)d: %(error)s') % {'row': row['row'], 'error': problems})
            continue

        try:
            with transaction.atomic():
                if existing:
                    if student.user_id:
                        update_login(student.user, student.username, student.name, student.surname,
                                     email=student.email)
                else:
                    student.user = create_login(
                        User.ROLE_STUDENT, row['username'], default_password,
                        row['name'], row['surname'],
                    )
                student.save()
        except IdentityError as exc:
            report['skipped'] += 1
            report['errors'].append(_('Row %(row)d: %(error)s') % {
                'row': row['row'], 'error': exc.issues[0].message,
            })
            continue

        if existing:
            report['updated'] += 1
        else:
            report['created'] += 1

    logger.info('Roster import: %(created)d created, %(updated)d updated, %(skipped)d skipped', report)
    return report
