from .dispatch import TABLES
from .menu import menu_for


def menu(request):
    """Sidebar items and the tables the signed-in user may write."""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return {}
    return {
        'menu_items': menu_for(user),
        'writable_tables': {
            slug for slug, entry in TABLES.items() if user.role in entry.write_roles
        },
    }
