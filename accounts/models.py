from django.contrib.auth.models import AbstractUser, UserManager as BaseUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """User manager that defaults superusers to the admin role."""

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', User.ROLE_ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Login account for every person using the dashboard.
    Teachers, students and parents log in as ``<role>_<account number>``;
    their school data lives on the matching profile in the schools app.
    """

    ROLE_ADMIN = 'admin'
    ROLE_TEACHER = 'teacher'
    ROLE_STUDENT = 'student'
    ROLE_PARENT = 'parent'

    ROLE_CHOICES = [
        (ROLE_ADMIN, _('Admin')),
        (ROLE_TEACHER, _('Teacher')),
        (ROLE_STUDENT, _('Student')),
        (ROLE_PARENT, _('Parent')),
    ]

    LANGUAGE_CHOICES = [
        ('en', 'English'),
        ('es', 'Español'),
    ]

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_STUDENT,
        verbose_name=_('Role')
    )

    preferred_language = models.CharField(
        max_length=5,
        choices=LANGUAGE_CHOICES,
        default='en',
        verbose_name=_('Preferred Language')
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    class Meta:
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        ordering = ['-created_at']

    def __str__(self):
        return self.get_full_name() or self.username

    @property
    def is_admin_role(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_teacher(self):
        return self.role == self.ROLE_TEACHER

    @property
    def is_student(self):
        return self.role == self.ROLE_STUDENT

    @property
    def is_parent(self):
        return self.role == self.ROLE_PARENT

    @property
    def profile(self):
        """The schools profile (Teacher, Student or Parent) bound to this login, if any."""
        related = {
            self.ROLE_TEACHER: 'teacher_profile',
            self.ROLE_STUDENT: 'student_profile',
            self.ROLE_PARENT: 'parent_profile',
        }.get(self.role)
        if related is None:
            return None
        return getattr(self, related, None)
