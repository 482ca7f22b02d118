from functools import wraps
from django.shortcuts import redirect
from django.contrib import messages
from django.utils.translation import gettext_lazy as _


def role_required(allowed_roles):
    """Decorator that requires user to have one of the allowed roles."""
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return redirect('accounts:login')
            if request.user.role not in allowed_roles:
                messages.error(request, _('You do not have permission to access this page.'))
                return redirect('dashboard:home')
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator


def admin_required(view_func):
    """Decorator that requires the admin role."""
    return role_required(['admin'])(view_func)


def staff_required(view_func):
    """Decorator that requires the admin or teacher role."""
    return role_required(['admin', 'teacher'])(view_func)
