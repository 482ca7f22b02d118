from django import forms
from django.contrib.auth import authenticate, password_validation
from django.contrib.auth.forms import PasswordChangeForm as BasePasswordChangeForm
from django.utils.translation import gettext_lazy as _

from .identity import login_username
from .models import User


class LoginForm(forms.Form):
    """
    Sign-in form. The visible identifier is the 6-digit account number;
    the login username is built from the selected role.
    """

    role = forms.ChoiceField(
        label=_('I am a'),
        choices=User.ROLE_CHOICES,
        initial=User.ROLE_STUDENT,
        widget=forms.RadioSelect(attrs={'class': 'form-radio'})
    )
    identifier = forms.CharField(
        label=_('Account number'),
        max_length=150,
        widget=forms.TextInput(attrs={
            'class': 'form-input',
            'placeholder': _('Enter your account number'),
            'autofocus': True,
            'autocomplete': 'username',
        })
    )
    password = forms.CharField(
        label=_('Password'),
        widget=forms.PasswordInput(attrs={
            'class': 'form-input',
            'placeholder': _('Enter your password'),
        })
    )

    def __init__(self, request=None, *args, **kwargs):
        self.request = request
        self.user_cache = None
        super().__init__(*args, **kwargs)

    def clean(self):
        role = self.cleaned_data.get('role')
        identifier = (self.cleaned_data.get('identifier') or '').strip()
        password = self.cleaned_data.get('password')

        if role and identifier and password:
            username = login_username(role, identifier)
            self.user_cache = authenticate(self.request, username=username, password=password)
            if self.user_cache is None:
                raise forms.ValidationError(_('Invalid account number or password.'))
            if self.user_cache.role != role:
                self.user_cache = None
                raise forms.ValidationError(_('Invalid account number or password.'))

        return self.cleaned_data

    def get_user(self):
        return self.user_cache


class ProfileForm(forms.ModelForm):
    """User profile edit form."""

    class Meta:
        model = User
        fields = ['first_name', 'last_name', 'preferred_language']
        widgets = {
            'first_name': forms.TextInput(attrs={'class': 'form-input'}),
            'last_name': forms.TextInput(attrs={'class': 'form-input'}),
            'preferred_language': forms.Select(attrs={'class': 'form-select'}),
        }


class PasswordChangeForm(BasePasswordChangeForm):
    """Custom password change form with styled fields."""

    old_password = forms.CharField(
        label=_('Current Password'),
        widget=forms.PasswordInput(attrs={
            'class': 'form-input',
            'placeholder': _('Enter current password'),
        })
    )
    new_password1 = forms.CharField(
        label=_('New Password'),
        widget=forms.PasswordInput(attrs={
            'class': 'form-input',
            'placeholder': _('Enter new password'),
        })
    )
    new_password2 = forms.CharField(
        label=_('Confirm New Password'),
        widget=forms.PasswordInput(attrs={
            'class': 'form-input',
            'placeholder': _('Confirm new password'),
        })
    )


class AdminPasswordResetForm(forms.Form):
    """Form for admins to reset a user's password."""

    new_password = forms.CharField(
        label=_('New Password'),
        widget=forms.PasswordInput(attrs={
            'class': 'form-input',
            'placeholder': _('Enter new password'),
        })
    )
    confirm_password = forms.CharField(
        label=_('Confirm Password'),
        widget=forms.PasswordInput(attrs={
            'class': 'form-input',
            'placeholder': _('Confirm new password'),
        })
    )

    def clean_new_password(self):
        password = self.cleaned_data.get('new_password')
        password_validation.validate_password(password)
        return password

    def clean(self):
        cleaned_data = super().clean()
        password = cleaned_data.get('new_password')
        confirm = cleaned_data.get('confirm_password')

        if password and confirm and password != confirm:
            raise forms.ValidationError(_('Passwords do not match.'))

        return cleaned_data
