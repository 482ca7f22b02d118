import pytest
from django import forms
from django.db import IntegrityError

from accounts.errors import apply_identity_errors, apply_integrity_error, describe_integrity_error
from accounts.identity import (
    IDENTIFIER_EXISTS, PASSWORD_REQUIREMENTS, USERNAME_INVALID_CHARACTER,
    IdentityError, create_login, delete_login, login_username, update_login,
)
from accounts.models import User

pytestmark = pytest.mark.django_db


class PersonStubForm(forms.Form):
    username = forms.CharField()
    email = forms.CharField(required=False)
    password = forms.CharField(required=False)


def test_login_username_is_role_prefixed_except_for_admins():
    assert login_username(User.ROLE_STUDENT, '000123') == 'student_000123'
    assert login_username(User.ROLE_ADMIN, 'root') == 'root'


def test_create_login_sets_role_and_password():
    user = create_login(User.ROLE_TEACHER, '100001', 'Campus2024x', 'Ana', 'Lopez')
    assert user.username == 'teacher_100001'
    assert user.role == User.ROLE_TEACHER
    assert user.check_password('Campus2024x')


def test_create_login_reports_taken_username():
    create_login(User.ROLE_TEACHER, '100001', 'Campus2024x', 'Ana', 'Lopez')
    with pytest.raises(IdentityError) as excinfo:
        create_login(User.ROLE_TEACHER, '100001', 'Campus2024x', 'Eva', 'Ruiz')
    issue = excinfo.value.issues[0]
    assert issue.code == IDENTIFIER_EXISTS
    assert issue.meta == {'identifier_type': 'username'}


def test_same_account_number_is_allowed_across_roles():
    create_login(User.ROLE_TEACHER, '100001', 'Campus2024x', 'Ana', 'Lopez')
    user = create_login(User.ROLE_PARENT, '100001', 'Campus2024x', 'Ana', 'Lopez')
    assert user.username == 'parent_100001'


def test_create_login_rejects_weak_password_and_bad_account_number():
    with pytest.raises(IdentityError) as excinfo:
        create_login(User.ROLE_STUDENT, '12ab56', 'short', 'Luis', 'Diaz')
    codes = {issue.code for issue in excinfo.value.issues}
    assert USERNAME_INVALID_CHARACTER in codes
    assert PASSWORD_REQUIREMENTS in codes
    assert not User.objects.exists()


def test_update_login_keeps_password_when_blank():
    user = create_login(User.ROLE_STUDENT, '200001', 'Campus2024x', 'Luis', 'Diaz')
    update_login(user, '200002', 'Luis', 'Diaz Perez')
    user.refresh_from_db()
    assert user.username == 'student_200002'
    assert user.last_name == 'Diaz Perez'
    assert user.check_password('Campus2024x')


def test_delete_login_handles_missing_user():
    assert delete_login(None) is False
    user = create_login(User.ROLE_PARENT, '300001', 'Campus2024x', 'Rosa', 'Diaz')
    assert delete_login(user) is True
    assert not User.objects.filter(username='parent_300001').exists()


def test_identity_issues_are_attached_to_form_fields():
    create_login(User.ROLE_TEACHER, '100001', 'Campus2024x', 'Ana', 'Lopez')
    form = PersonStubForm(data={'username': '100001', 'password': 'x'})
    assert form.is_valid()
    with pytest.raises(IdentityError) as excinfo:
        create_login(User.ROLE_TEACHER, '100001', 'weak', 'Ana', 'Lopez')

    message = apply_identity_errors(form, excinfo.value.issues)

    assert message == 'This account number is already in use. Please use another one.'
    assert 'username' in form.errors
    assert 'password' in form.errors


def test_sqlite_unique_error_maps_to_field():
    exc = IntegrityError('UNIQUE constraint failed: schools_teacher.email')
    issues = describe_integrity_error(exc)
    assert [(i.code, i.field) for i in issues] == [('unique_constraint', 'email')]

    form = PersonStubForm(data={'username': '100001', 'email': 'a@b.c'})
    assert form.is_valid()
    message = apply_integrity_error(form, exc)
    assert message == 'A record with this email address already exists.'
    assert form.errors['email'] == ['This email address is already in use. Please use another one.']


def test_postgres_unique_and_foreign_key_errors_are_recognised():
    unique = describe_integrity_error(IntegrityError(
        'duplicate key value violates unique constraint\nDETAIL:  Key (phone)=(555) already exists.'
    ))
    assert unique[0].field == 'phone'

    reference = describe_integrity_error(IntegrityError(
        'insert or update violates foreign key constraint\n'
        'DETAIL:  Key (school_class_id)=(9) is not present in table "schools_schoolclass".'
    ))
    assert reference[0].code == 'invalid_reference'
    assert reference[0].field == 'school_class'


def test_unknown_integrity_error_gives_generic_message():
    form = PersonStubForm(data={'username': '1'})
    assert form.is_valid()
    message = apply_integrity_error(form, IntegrityError('something odd'))
    assert message == 'An error occurred while processing the request.'
    assert not form.errors
