"""
Attendance writes. The bulk sheet replaces one lesson's records for a day.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext as _

from schools.models import Student
from .models import Attendance

logger = logging.getLogger(__name__)


def take_attendance(lesson, date, marks):
    """
    Replace the attendance of ``lesson`` on ``date``.

    ``marks`` maps student id -> present. Every student must belong to the
    lesson's class; nothing is written otherwise.
    """
    student_ids = set(marks)
    members = set(
        Student.objects.filter(
            school_class=lesson.school_class_id, pk__in=student_ids
        ).values_list('pk', flat=True)
    )
    outsiders = student_ids - members
    if outsiders:
        raise ValidationError(
            _('%(count)d of the selected students do not belong to the class of this lesson.'),
            code='not_in_class',
            params={'count': len(outsiders)},
        )

    with transaction.atomic():
        Attendance.objects.filter(lesson=lesson, date=date).delete()
        records = Attendance.objects.bulk_create([
            Attendance(lesson=lesson, date=date, student_id=student_id, present=present)
            for student_id, present in sorted(marks.items())
        ])

    logger.info('Attendance taken for lesson %s on %s: %d records', lesson.pk, date, len(records))
    return records
