from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from accounts.validators import account_number_validator


class StaffOnlyQuerySet(models.QuerySet):
    """Directory data: admins and teachers see everything, nobody else does."""

    def visible_to(self, user):
        if getattr(user, 'role', None) in ('admin', 'teacher'):
            return self
        return self.none()


class Grade(models.Model):
    """School year level (1, 2, 3...)."""

    level = models.PositiveIntegerField(unique=True, verbose_name=_('Level'))

    class Meta:
        verbose_name = _('Grade')
        verbose_name_plural = _('Grades')
        ordering = ['level']

    def __str__(self):
        return str(self.level)


class Person(models.Model):
    """
    Fields shared by teachers, students and parents.
    ``username`` is the 6-digit account number; the login account itself
    is the linked ``user``.
    """

    SEX_MALE = 'MALE'
    SEX_FEMALE = 'FEMALE'
    SEX_CHOICES = [
        (SEX_MALE, _('Male')),
        (SEX_FEMALE, _('Female')),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)s_profile',
        verbose_name=_('Login')
    )
    username = models.CharField(
        max_length=6,
        unique=True,
        validators=[account_number_validator],
        verbose_name=_('Account number'),
        error_messages={'unique': _('This account number is already in use. Please use another one.')},
    )
    name = models.CharField(max_length=100, verbose_name=_('Name'))
    surname = models.CharField(max_length=100, verbose_name=_('Surname'))
    email = models.EmailField(
        unique=True,
        null=True,
        blank=True,
        verbose_name=_('Email'),
        error_messages={'unique': _('This email address is already in use. Please use another one.')},
    )
    phone = models.CharField(
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        verbose_name=_('Phone'),
        error_messages={'unique': _('This phone number is already in use. Please use another one.')},
    )
    address = models.CharField(max_length=255, verbose_name=_('Address'))
    img = models.ImageField(upload_to='people/', blank=True, null=True, verbose_name=_('Photo'))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.name} {self.surname}"


class Teacher(Person):
    blood_type = models.CharField(max_length=5, verbose_name=_('Blood Type'))
    sex = models.CharField(max_length=6, choices=Person.SEX_CHOICES, verbose_name=_('Sex'))
    birthday = models.DateField(verbose_name=_('Birthday'))

    objects = StaffOnlyQuerySet.as_manager()

    class Meta(Person.Meta):
        verbose_name = _('Teacher')
        verbose_name_plural = _('Teachers')


class Parent(Person):
    objects = StaffOnlyQuerySet.as_manager()

    class Meta(Person.Meta):
        verbose_name = _('Parent')
        verbose_name_plural = _('Parents')


class SchoolClass(models.Model):
    """A class group (e.g. 1A) with a seat limit."""

    name = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('Name'),
        error_messages={'unique': _('A class with this name already exists. Please choose another name.')},
    )
    capacity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_('Capacity')
    )
    grade = models.ForeignKey(
        Grade,
        on_delete=models.PROTECT,
        related_name='classes',
        verbose_name=_('Grade')
    )
    supervisor = models.ForeignKey(
        Teacher,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='supervised_classes',
        verbose_name=_('Supervisor')
    )

    objects = StaffOnlyQuerySet.as_manager()

    class Meta:
        verbose_name = _('Class')
        verbose_name_plural = _('Classes')
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def student_count(self):
        return self.students.count()

    @property
    def is_full(self):
        return self.student_count >= self.capacity


class StudentQuerySet(models.QuerySet):
    def visible_to(self, user):
        role = getattr(user, 'role', None)
        if role in ('admin', 'teacher'):
            return self
        if role == 'student':
            return self.filter(user=user)
        if role == 'parent':
            return self.filter(parent__user=user)
        return self.none()


class Student(Person):
    blood_type = models.CharField(max_length=5, verbose_name=_('Blood Type'))
    sex = models.CharField(max_length=6, choices=Person.SEX_CHOICES, verbose_name=_('Sex'))
    birthday = models.DateField(verbose_name=_('Birthday'))

    grade = models.ForeignKey(
        Grade,
        on_delete=models.PROTECT,
        related_name='students',
        verbose_name=_('Grade')
    )
    school_class = models.ForeignKey(
        SchoolClass,
        on_delete=models.PROTECT,
        related_name='students',
        verbose_name=_('Class')
    )
    parent = models.ForeignKey(
        Parent,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='students',
        verbose_name=_('Parent')
    )

    objects = StudentQuerySet.as_manager()

    class Meta(Person.Meta):
        verbose_name = _('Student')
        verbose_name_plural = _('Students')


class Subject(models.Model):
    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name=_('Subject Name'),
        error_messages={'unique': _('A subject with this name already exists.')},
    )
    teachers = models.ManyToManyField(
        Teacher,
        blank=True,
        related_name='subjects',
        verbose_name=_('Teachers')
    )

    objects = StaffOnlyQuerySet.as_manager()

    class Meta:
        verbose_name = _('Subject')
        verbose_name_plural = _('Subjects')
        ordering = ['name']

    def __str__(self):
        return self.name


class LessonQuerySet(models.QuerySet):
    def visible_to(self, user):
        role = getattr(user, 'role', None)
        if role in ('admin', 'teacher'):
            return self
        if role == 'student':
            return self.filter(school_class__students__user=user)
        if role == 'parent':
            return self.filter(school_class__students__parent__user=user).distinct()
        return self.none()

    def taught_by(self, user):
        return self.filter(teacher__user=user)

    def overlapping(self, day, start_time, end_time, exclude_pk=None):
        """Lessons on ``day`` whose [start, end) interval intersects the given one."""
        qs = self.filter(day=day, start_time__lt=end_time, end_time__gt=start_time)
        if exclude_pk:
            qs = qs.exclude(pk=exclude_pk)
        return qs


class Lesson(models.Model):
    """Weekly recurring lesson slot for a class."""

    class Day(models.IntegerChoices):
        MONDAY = 1, _('Monday')
        TUESDAY = 2, _('Tuesday')
        WEDNESDAY = 3, _('Wednesday')
        THURSDAY = 4, _('Thursday')
        FRIDAY = 5, _('Friday')

    name = models.CharField(max_length=100, verbose_name=_('Name'))
    day = models.PositiveSmallIntegerField(choices=Day.choices, verbose_name=_('Day'))
    start_time = models.TimeField(verbose_name=_('Start Time'))
    end_time = models.TimeField(verbose_name=_('End Time'))

    subject = models.ForeignKey(
        Subject,
        on_delete=models.PROTECT,
        related_name='lessons',
        verbose_name=_('Subject')
    )
    school_class = models.ForeignKey(
        SchoolClass,
        on_delete=models.PROTECT,
        related_name='lessons',
        verbose_name=_('Class')
    )
    teacher = models.ForeignKey(
        Teacher,
        on_delete=models.PROTECT,
        related_name='lessons',
        verbose_name=_('Teacher')
    )

    objects = LessonQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lesson')
        verbose_name_plural = _('Lessons')
        ordering = ['day', 'start_time']

    def __str__(self):
        return f"{self.name} - {self.school_class.name}"


def staff_or_class_member(user, class_lookup):
    """
    Q for rows tied to a class the user can see; used by event-style models
    where a null class means everyone.
    """
    role = getattr(user, 'role', None)
    if role == 'teacher':
        return Q(**{f'{class_lookup}__lessons__teacher__user': user})
    if role == 'student':
        return Q(**{f'{class_lookup}__students__user': user})
    if role == 'parent':
        return Q(**{f'{class_lookup}__students__parent__user': user})
    return None
