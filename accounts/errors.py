"""
Maps database and identity failures onto form fields.

Database errors arrive as ``IntegrityError`` with backend-specific messages;
identity failures arrive as ``IdentityError`` issues. Both end up as field
errors on the bound form plus one summary message for the toast.
"""
import logging
import re
from dataclasses import dataclass

from django.utils.translation import gettext as _

from .identity import (
    EMAIL_INVALID, IDENTIFIER_EXISTS, PARAM_INVALID, PARAM_UNKNOWN,
    PASSWORD_PWNED, PASSWORD_REQUIREMENTS, USERNAME_INVALID_CHARACTER,
)

logger = logging.getLogger(__name__)


UNIQUE_CONSTRAINT = 'unique_constraint'
INVALID_REFERENCE = 'invalid_reference'
VALIDATION_ERROR = 'validation_error'

# sqlite: "UNIQUE constraint failed: schools_teacher.email, schools_teacher.phone"
SQLITE_UNIQUE_RE = re.compile(r'UNIQUE constraint failed: (?P<columns>.+)$', re.MULTILINE)
# postgres: "DETAIL:  Key (email)=(a@b.c) already exists."
PG_UNIQUE_RE = re.compile(r'Key \((?P<columns>[^)]+)\)=\(.*\) already exists')
# postgres: "DETAIL:  Key (school_class_id)=(9) is not present in table ..."
PG_FOREIGN_KEY_RE = re.compile(r'Key \((?P<columns>[^)]+)\)=\(.*\) is not present')


def field_label(field):
    """Human-readable label for a form field name."""
    labels = {
        'username': _('account number'),
        'email': _('email address'),
        'password': _('password'),
        'phone': _('phone number'),
        'name': _('name'),
        'surname': _('surname'),
        'address': _('address'),
    }
    return labels.get(field, field)


@dataclass
class FieldIssue:
    code: str
    field: str
    message: str


def _column_to_field(column):
    column = column.strip().strip('"')
    if '.' in column:
        column = column.rsplit('.', 1)[1]
    if column.endswith('_id'):
        column = column[:-3]
    return column


def describe_integrity_error(exc):
    """Turn an IntegrityError into a list of FieldIssue."""
    text = str(exc)
    issues = []

    match = SQLITE_UNIQUE_RE.search(text) or PG_UNIQUE_RE.search(text)
    if match:
        for column in match.group('columns').split(','):
            name = _column_to_field(column)
            issues.append(FieldIssue(
                code=UNIQUE_CONSTRAINT,
                field=name,
                message=_('This %(label)s is already in use. Please use another one.') % {
                    'label': field_label(name),
                },
            ))
        return issues

    match = PG_FOREIGN_KEY_RE.search(text)
    if match:
        name = _column_to_field(match.group('columns'))
        return [FieldIssue(
            code=INVALID_REFERENCE,
            field=name,
            message=_('Invalid value for %(label)s.') % {'label': field_label(name)},
        )]

    if 'FOREIGN KEY constraint failed' in text or 'foreign key constraint' in text:
        return [FieldIssue(
            code=INVALID_REFERENCE,
            field='',
            message=_('Invalid reference to a related record.'),
        )]

    return []


def apply_integrity_error(form, exc):
    """Attach IntegrityError details to the form and return the toast message."""
    issues = describe_integrity_error(exc)
    if not issues:
        logger.error('Unmapped integrity error: %s', exc)
        return _('An error occurred while processing the request.')

    for issue in issues:
        if issue.field in form.fields:
            form.add_error(issue.field, issue.message)
        else:
            form.add_error(None, issue.message)

    first = issues[0]
    if first.code == UNIQUE_CONSTRAINT:
        return _('A record with this %(label)s already exists.') % {'label': field_label(first.field)}
    return first.message


def localize_identity_error(code, default=''):
    """Localized text for an identity issue code."""
    messages = {
        IDENTIFIER_EXISTS: _('This identifier is already in use. Please use another one.'),
        USERNAME_INVALID_CHARACTER: _('The account number contains invalid characters.'),
        PASSWORD_PWNED: _('This password is not secure. Please use a different password.'),
        PASSWORD_REQUIREMENTS: _(
            'The password must be at least 8 characters long, including an uppercase '
            'letter, a lowercase letter and a number.'
        ),
        EMAIL_INVALID: _('The email address is not valid.'),
        PARAM_UNKNOWN: _('Error in the form structure. Please contact the administrator.'),
        PARAM_INVALID: _('Invalid value in the form.'),
    }
    return messages.get(code) or default or _('Validation error')


def _identity_issue_target(issue):
    """Return (field, message) for one identity issue."""
    code = issue.code
    meta = issue.meta or {}

    if code == IDENTIFIER_EXISTS:
        identifier_type = meta.get('identifier_type')
        if identifier_type == 'username':
            return 'username', _('This account number is already in use. Please use another one.')
        if identifier_type == 'email_address':
            return 'email', _('This email address is already in use. Please use another one.')
        return '', _('This identifier is already in use. Please use another one.')

    if code == PARAM_UNKNOWN:
        if meta.get('param_name'):
            logger.error('Unknown form parameter: %s', meta['param_name'])
        return '', _('Form error. Please contact the administrator.')

    if code == USERNAME_INVALID_CHARACTER:
        return 'username', _('The account number may only contain digits.')

    if code == PASSWORD_PWNED:
        return 'password', _('This password is not secure. Please use a different password.')

    if code == PASSWORD_REQUIREMENTS:
        return 'password', issue.long_message or localize_identity_error(code)

    if code == EMAIL_INVALID:
        return 'email', _('The email address is not valid.')

    return '', localize_identity_error(code, issue.message)


def apply_identity_errors(form, issues):
    """Attach identity issues to the form and return the first message."""
    messages = []
    for issue in issues:
        field, message = _identity_issue_target(issue)
        if field and field in form.fields:
            form.add_error(field, message)
        messages.append(message)

    if messages:
        return messages[0]
    return _('A validation error occurred.')
