"""
Check that the Supabase environment variables are visible to the app.

    python manage.py check_env [--env-file .env.local] [--strict]
"""

import os

from decouple import RepositoryEnv
from django.core.management.base import BaseCommand, CommandError

from apps.debug.views import is_local_url

URL_VARIABLE = 'NEXT_PUBLIC_SUPABASE_URL'
SERVICE_KEY_VARIABLE = 'SUPABASE_SERVICE_ROLE_KEY'
KEY_PREVIEW_LENGTH = 20


class Command(BaseCommand):
    help = 'Report whether the Supabase URL and service role key are set'

    def add_arguments(self, parser):
        parser.add_argument(
            '--env-file',
            default='.env.local',
            help='dotenv file to read in addition to the process environment (default: .env.local)',
        )
        parser.add_argument(
            '--strict',
            action='store_true',
            help='Exit with an error when a variable is missing',
        )

    def handle(self, *args, **options):
        env_file = options['env_file']
        self.stdout.write('Starting debug...\n')

        file_values = {}
        try:
            file_values = RepositoryEnv(env_file).data
            load_result = self.style.SUCCESS('SUCCESS')
        except (OSError, UnicodeDecodeError, ValueError) as e:
            load_result = self.style.ERROR(f'ERROR ({getattr(e, "strerror", None) or e})')

        self.stdout.write(f'1. {env_file} load: {load_result}')
        self.stdout.write(f'2. {env_file} exists: {os.path.exists(env_file)}')

        supabase_url = os.environ.get(URL_VARIABLE) or file_values.get(URL_VARIABLE)
        service_key = os.environ.get(SERVICE_KEY_VARIABLE) or file_values.get(SERVICE_KEY_VARIABLE)

        self.stdout.write(f'3. {URL_VARIABLE}: {self._presence(supabase_url)}')
        self.stdout.write(f'4. {SERVICE_KEY_VARIABLE}: {self._presence(service_key)}')

        if supabase_url:
            self.stdout.write(f'   URL value: {supabase_url}')
            self.stdout.write(f'   Is localhost: {is_local_url(supabase_url)}')

        if service_key:
            self.stdout.write(f'   Key starts with: {service_key[:KEY_PREVIEW_LENGTH]}')
            self.stdout.write(f'   Key length: {len(service_key)}')

        self.stdout.write('\nDebug complete')

        if options['strict']:
            missing = [
                name for name, value in ((URL_VARIABLE, supabase_url), (SERVICE_KEY_VARIABLE, service_key))
                if not value
            ]
            if missing:
                raise CommandError(f'Missing environment variables: {", ".join(missing)}')

    def _presence(self, value):
        if value:
            return self.style.SUCCESS('EXISTS')
        return self.style.ERROR('MISSING')
