from django.db import models
from django.utils.translation import gettext_lazy as _


class AttendanceQuerySet(models.QuerySet):
    def visible_to(self, user):
        role = getattr(user, 'role', None)
        if role == 'admin':
            return self
        if role == 'teacher':
            return self.filter(lesson__teacher__user=user)
        if role == 'student':
            return self.filter(student__user=user)
        if role == 'parent':
            return self.filter(student__parent__user=user)
        return self.none()


class Attendance(models.Model):
    """One student's presence at one lesson on one calendar day."""

    date = models.DateField(verbose_name=_('Date'))
    present = models.BooleanField(default=False, verbose_name=_('Present'))

    student = models.ForeignKey(
        'schools.Student',
        on_delete=models.CASCADE,
        related_name='attendances',
        verbose_name=_('Student')
    )
    lesson = models.ForeignKey(
        'schools.Lesson',
        on_delete=models.PROTECT,
        related_name='attendances',
        verbose_name=_('Lesson')
    )

    objects = AttendanceQuerySet.as_manager()

    class Meta:
        verbose_name = _('Attendance')
        verbose_name_plural = _('Attendance')
        ordering = ['-date', 'student__surname']
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'lesson', 'date'],
                name='unique_attendance_per_day',
            ),
        ]

    def __str__(self):
        return f"{self.student} - {self.lesson.name} ({self.date})"
