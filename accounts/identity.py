"""
Login account provisioning.

Teachers, students and parents get a Django login whose username is the
role-prefixed account number. Every failure is reported as an
``IdentityError`` carrying provider-style issue codes, so the form layer
can map them back to fields (see ``accounts.errors``).
"""
import logging
from dataclasses import dataclass, field

from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, transaction

from .models import User

logger = logging.getLogger(__name__)


IDENTIFIER_EXISTS = 'form_identifier_exists'
USERNAME_INVALID_CHARACTER = 'form_username_invalid_character'
PASSWORD_PWNED = 'form_password_pwned'
PASSWORD_REQUIREMENTS = 'form_password_requirements'
EMAIL_INVALID = 'form_email_invalid'
PARAM_UNKNOWN = 'form_param_unknown'
PARAM_INVALID = 'form_param_invalid'

# Django password validator codes -> issue codes
PASSWORD_CODE_MAP = {
    'password_too_common': PASSWORD_PWNED,
    'password_requirements': PASSWORD_REQUIREMENTS,
    'password_too_short': PASSWORD_REQUIREMENTS,
    'password_entirely_numeric': PASSWORD_REQUIREMENTS,
}


@dataclass
class IdentityIssue:
    code: str
    message: str = ''
    long_message: str = ''
    meta: dict = field(default_factory=dict)


class IdentityError(Exception):
    """Raised when a login account cannot be created or updated."""

    def __init__(self, issues):
        self.issues = list(issues)
        super().__init__('; '.join(issue.code for issue in self.issues))


def login_username(role, account_number):
    if role == User.ROLE_ADMIN:
        return account_number
    return f'{role}_{account_number}'


def _password_issues(password, user=None):
    try:
        password_validation.validate_password(password, user=user)
    except ValidationError as exc:
        issues = []
        for error in exc.error_list:
            code = PASSWORD_CODE_MAP.get(error.code, PASSWORD_REQUIREMENTS)
            message = ' '.join(error.messages)
            issues.append(IdentityIssue(code=code, message=message, long_message=message))
        return issues
    return []


def _collect_issues(username, account_number, email, password, exclude_pk=None, password_required=True):
    issues = []

    if not account_number or not str(account_number).isdigit():
        issues.append(IdentityIssue(
            code=USERNAME_INVALID_CHARACTER,
            message='Username contains invalid characters.',
            meta={'param_name': 'username'},
        ))

    taken = User.objects.filter(username=username)
    if exclude_pk is not None:
        taken = taken.exclude(pk=exclude_pk)
    if taken.exists():
        issues.append(IdentityIssue(
            code=IDENTIFIER_EXISTS,
            message='That username is taken.',
            meta={'identifier_type': 'username'},
        ))

    if email:
        try:
            validate_email(email)
        except ValidationError:
            issues.append(IdentityIssue(
                code=EMAIL_INVALID,
                message='Email address is invalid.',
                meta={'param_name': 'email_address'},
            ))
        else:
            taken = User.objects.filter(email__iexact=email)
            if exclude_pk is not None:
                taken = taken.exclude(pk=exclude_pk)
            if taken.exists():
                issues.append(IdentityIssue(
                    code=IDENTIFIER_EXISTS,
                    message='That email address is taken.',
                    meta={'identifier_type': 'email_address'},
                ))

    if password or password_required:
        issues.extend(_password_issues(password))

    return issues


def create_login(role, account_number, password, first_name, last_name, email=None):
    """Create the login account for a new person. Raises IdentityError."""
    username = login_username(role, account_number)
    issues = _collect_issues(username, account_number, email, password)
    if issues:
        raise IdentityError(issues)

    user = User.objects.create_user(
        username=username,
        password=password,
        email=email or '',
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    logger.info('Created %s login %s', role, username)
    return user


def update_login(user, account_number, first_name, last_name, password=None, email=None):
    """Update an existing login; the password only changes when one is given."""
    username = login_username(user.role, account_number)
    issues = _collect_issues(
        username, account_number, email, password,
        exclude_pk=user.pk, password_required=False,
    )
    if issues:
        raise IdentityError(issues)

    user.username = username
    user.first_name = first_name
    user.last_name = last_name
    user.email = email or ''
    if password:
        user.set_password(password)
    user.save()
    return user


def delete_login(user):
    """
    Remove a login account. The profile is already gone at this point, so a
    failure here is logged and reported through the return value only.
    """
    if user is None:
        return False
    try:
        with transaction.atomic():
            user.delete()
    except DatabaseError:
        logger.exception('Could not delete login %s', user.username)
        return False
    logger.info('Deleted login %s', user.username)
    return True
