from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth import login, logout, update_session_auth_hash
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.conf import settings
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext_lazy as _, activate

from .models import User
from .forms import LoginForm, ProfileForm, PasswordChangeForm, AdminPasswordResetForm
from .decorators import admin_required


def _with_language(response, language):
    activate(language)
    response.set_cookie(settings.LANGUAGE_COOKIE_NAME, language)
    return response


def login_view(request):
    """User login view."""
    if request.user.is_authenticated:
        return redirect('dashboard:home')

    if request.method == 'POST':
        form = LoginForm(request, data=request.POST)
        if form.is_valid():
            user = form.get_user()
            login(request, user)
            messages.success(request, _('Welcome back, %(name)s!') % {'name': user.first_name or user.username})

            next_url = request.GET.get('next', '')
            if not url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                next_url = 'dashboard:home'
            return _with_language(redirect(next_url), user.preferred_language)
    else:
        form = LoginForm()

    return render(request, 'accounts/login.html', {'form': form})


def logout_view(request):
    """User logout view."""
    logout(request)
    messages.info(request, _('You have been logged out.'))
    return redirect('accounts:login')


@login_required
def profile_view(request):
    """User profile view."""
    user = request.user

    if request.method == 'POST':
        form = ProfileForm(request.POST, instance=user)
        if form.is_valid():
            form.save()
            messages.success(request, _('Profile updated successfully.'))
            response = redirect('accounts:profile')
            if 'preferred_language' in form.changed_data:
                response = _with_language(response, user.preferred_language)
            return response
    else:
        form = ProfileForm(instance=user)

    return render(request, 'accounts/profile.html', {'form': form})


@login_required
def password_change_view(request):
    """Password change view (requires current password)."""
    if request.method == 'POST':
        form = PasswordChangeForm(request.user, request.POST)
        if form.is_valid():
            user = form.save()
            update_session_auth_hash(request, user)
            messages.success(request, _('Password changed successfully.'))
            return redirect('accounts:profile')
    else:
        form = PasswordChangeForm(request.user)

    return render(request, 'accounts/password_change.html', {'form': form})


@login_required
@admin_required
def admin_reset_password_view(request, pk):
    """Admin resets a user's password."""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'POST':
        form = AdminPasswordResetForm(request.POST)
        if form.is_valid():
            user.set_password(form.cleaned_data['new_password'])
            user.save()
            messages.success(request, _('Password reset for "%(name)s".') % {'name': user.get_full_name() or user.username})
            return redirect('dashboard:home')
    else:
        form = AdminPasswordResetForm()

    return render(request, 'accounts/admin_reset_password.html', {
        'form': form,
        'user_obj': user,
    })
