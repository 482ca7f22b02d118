from django.conf import settings
from django.core.validators import MaxValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class LessonScopedQuerySet(models.QuerySet):
    """Rows that hang off a lesson: teachers see their own lessons, families their class."""

    def visible_to(self, user):
        role = getattr(user, 'role', None)
        if role == 'admin':
            return self
        if role == 'teacher':
            return self.filter(lesson__teacher__user=user)
        if role == 'student':
            return self.filter(lesson__school_class__students__user=user)
        if role == 'parent':
            return self.filter(lesson__school_class__students__parent__user=user).distinct()
        return self.none()


class Exam(models.Model):
    title = models.CharField(max_length=200, verbose_name=_('Title'))
    start_time = models.DateTimeField(verbose_name=_('Start Time'))
    end_time = models.DateTimeField(verbose_name=_('End Time'))

    lesson = models.ForeignKey(
        'schools.Lesson',
        on_delete=models.PROTECT,
        related_name='exams',
        verbose_name=_('Lesson')
    )

    objects = LessonScopedQuerySet.as_manager()

    class Meta:
        verbose_name = _('Exam')
        verbose_name_plural = _('Exams')
        ordering = ['-start_time']

    def __str__(self):
        return self.title

    @property
    def duration(self):
        return self.end_time - self.start_time


class Assignment(models.Model):
    """
    Homework with an open window; the status is derived from the current time.
    """

    STATUS_UPCOMING = 'upcoming'
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_OVERDUE = 'overdue'
    STATUS_LABELS = {
        STATUS_UPCOMING: _('Pending'),
        STATUS_IN_PROGRESS: _('In progress'),
        STATUS_OVERDUE: _('Overdue'),
    }

    title = models.CharField(max_length=200, verbose_name=_('Title'))
    start_date = models.DateTimeField(verbose_name=_('Start Date'))
    due_date = models.DateTimeField(verbose_name=_('Due Date'))

    lesson = models.ForeignKey(
        'schools.Lesson',
        on_delete=models.PROTECT,
        related_name='assignments',
        verbose_name=_('Lesson')
    )

    objects = LessonScopedQuerySet.as_manager()

    class Meta:
        verbose_name = _('Assignment')
        verbose_name_plural = _('Assignments')
        ordering = ['-due_date']

    def __str__(self):
        return self.title

    def status(self, now=None):
        now = now or timezone.now()
        if now < self.start_date:
            return self.STATUS_UPCOMING
        if now > self.due_date:
            return self.STATUS_OVERDUE
        return self.STATUS_IN_PROGRESS

    @property
    def status_label(self):
        return self.STATUS_LABELS[self.status()]


class ResultQuerySet(models.QuerySet):
    def visible_to(self, user):
        role = getattr(user, 'role', None)
        if role == 'admin':
            return self
        if role == 'teacher':
            return self.filter(
                Q(exam__lesson__teacher__user=user) | Q(assignment__lesson__teacher__user=user)
            )
        if role == 'student':
            return self.filter(student__user=user)
        if role == 'parent':
            return self.filter(student__parent__user=user)
        return self.none()

    def passing(self):
        return self.filter(score__gte=settings.CAMPUSBOARD['PASS_MARK'])


class Result(models.Model):
    """
    Score for one student on either an exam or an assignment.
    """

    TYPE_EXAM = 'exam'
    TYPE_ASSIGNMENT = 'assignment'
    TYPE_CHOICES = [
        (TYPE_EXAM, _('Exam')),
        (TYPE_ASSIGNMENT, _('Assignment')),
    ]

    score = models.PositiveSmallIntegerField(
        validators=[MaxValueValidator(100)],
        verbose_name=_('Score')
    )
    student = models.ForeignKey(
        'schools.Student',
        on_delete=models.CASCADE,
        related_name='results',
        verbose_name=_('Student')
    )
    exam = models.ForeignKey(
        Exam,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='results',
        verbose_name=_('Exam')
    )
    assignment = models.ForeignKey(
        Assignment,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='results',
        verbose_name=_('Assignment')
    )

    objects = ResultQuerySet.as_manager()

    class Meta:
        verbose_name = _('Result')
        verbose_name_plural = _('Results')
        ordering = ['-id']
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(exam__isnull=False, assignment__isnull=True)
                    | Q(exam__isnull=True, assignment__isnull=False)
                ),
                name='result_single_assessment',
            ),
            models.UniqueConstraint(
                fields=['student', 'exam'],
                condition=Q(exam__isnull=False),
                name='unique_exam_result',
            ),
            models.UniqueConstraint(
                fields=['student', 'assignment'],
                condition=Q(assignment__isnull=False),
                name='unique_assignment_result',
            ),
        ]

    def __str__(self):
        return f"{self.student} - {self.title}: {self.score}"

    @property
    def assessment(self):
        return self.exam or self.assignment

    @property
    def assessment_type(self):
        return self.TYPE_EXAM if self.exam_id else self.TYPE_ASSIGNMENT

    @property
    def assessment_type_label(self):
        return dict(self.TYPE_CHOICES)[self.assessment_type]

    @property
    def title(self):
        assessment = self.assessment
        return assessment.title if assessment else ''

    @property
    def lesson(self):
        assessment = self.assessment
        return assessment.lesson if assessment else None

    @property
    def date(self):
        if self.exam_id:
            return self.exam.start_time
        return self.assignment.start_date if self.assignment_id else None

    @property
    def is_passing(self):
        return self.score >= settings.CAMPUSBOARD['PASS_MARK']
