import re

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.utils.translation import gettext_lazy as _


ACCOUNT_NUMBER_LENGTH = 6

account_number_validator = RegexValidator(
    regex=r'^\d{6}$',
    message=_('The account number must be exactly 6 numeric digits.'),
    code='invalid_account_number',
)


class PasswordStrengthValidator:
    """
    At least 8 characters with one uppercase letter, one lowercase letter
    and one digit.
    """

    def __init__(self, min_length=8):
        self.min_length = min_length

    def validate(self, password, user=None):
        if (
            not password
            or len(password) < self.min_length
            or not re.search(r'[A-Z]', password)
            or not re.search(r'[a-z]', password)
            or not re.search(r'[0-9]', password)
        ):
            raise ValidationError(self.get_help_text(), code='password_requirements')

    def get_help_text(self):
        return _(
            'The password must be at least %(min_length)d characters long and include '
            'an uppercase letter, a lowercase letter and a number.'
        ) % {'min_length': self.min_length}


def is_strong_password(password):
    try:
        PasswordStrengthValidator().validate(password)
    except ValidationError:
        return False
    return True
