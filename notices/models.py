from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from schools.models import staff_or_class_member


class NoticeQuerySet(models.QuerySet):
    """Items without a class are global; class items reach that class only."""

    def visible_to(self, user):
        role = getattr(user, 'role', None)
        if role == 'admin':
            return self
        member = staff_or_class_member(user, 'school_class')
        if member is None:
            return self.none()
        return self.filter(Q(school_class__isnull=True) | member).distinct()

    def global_only(self):
        return self.filter(school_class__isnull=True)


class Event(models.Model):
    title = models.CharField(max_length=200, verbose_name=_('Title'))
    description = models.TextField(verbose_name=_('Description'))
    start_time = models.DateTimeField(verbose_name=_('Start Time'))
    end_time = models.DateTimeField(verbose_name=_('End Time'))

    school_class = models.ForeignKey(
        'schools.SchoolClass',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='events',
        verbose_name=_('Class')
    )

    objects = NoticeQuerySet.as_manager()

    class Meta:
        verbose_name = _('Event')
        verbose_name_plural = _('Events')
        ordering = ['-start_time']

    def __str__(self):
        return self.title


class Announcement(models.Model):
    title = models.CharField(max_length=200, verbose_name=_('Title'))
    description = models.TextField(verbose_name=_('Description'))
    date = models.DateTimeField(verbose_name=_('Date'))

    school_class = models.ForeignKey(
        'schools.SchoolClass',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='announcements',
        verbose_name=_('Class')
    )

    objects = NoticeQuerySet.as_manager()

    class Meta:
        verbose_name = _('Announcement')
        verbose_name_plural = _('Announcements')
        ordering = ['-date']

    def __str__(self):
        return self.title
