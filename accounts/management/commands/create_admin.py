"""
Management command to create the initial admin user.
"""
import os

from django.core.management.base import BaseCommand, CommandError
from accounts.models import User


class Command(BaseCommand):
    help = 'Creates the initial admin user for the dashboard'

    def add_arguments(self, parser):
        parser.add_argument('--username', default=os.environ.get('ADMIN_USERNAME', 'admin'))
        parser.add_argument('--password', default=os.environ.get('ADMIN_PASSWORD', ''))
        parser.add_argument('--email', default=os.environ.get('ADMIN_EMAIL', ''))

    def handle(self, *args, **options):
        username = options['username']
        password = options['password']

        if not password:
            raise CommandError('An admin password is required (--password or ADMIN_PASSWORD).')

        if User.objects.filter(username=username).exists():
            self.stdout.write(self.style.WARNING(f'Admin {username} already exists.'))
            return

        User.objects.create_superuser(
            username=username,
            email=options['email'],
            password=password,
            first_name='Admin',
            role=User.ROLE_ADMIN,
        )

        self.stdout.write(self.style.SUCCESS('Admin created successfully!'))
        self.stdout.write(f'Username: {username}')
