from django.utils.translation import gettext as _

from dashboard.errors import DeletionBlocked


def delete_exam(exam):
    count = exam.results.count()
    if count:
        raise DeletionBlocked(
            _('Cannot delete this exam because it has %(count)d results. Delete the results first.') % {
                'count': count,
            }
        )
    exam.delete()


def delete_assignment(assignment):
    count = assignment.results.count()
    if count:
        raise DeletionBlocked(
            _('Cannot delete this assignment because it has %(count)d results. Delete the results first.') % {
                'count': count,
            }
        )
    assignment.delete()
