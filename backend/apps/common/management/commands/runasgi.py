"""
Run the project under uvicorn so the assistant SSE endpoint can stream.

Usage: python -m django runasgi [--host HOST] [--port PORT] [--no-reload]
"""
import uvicorn
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = 'Run Django with ASGI server (uvicorn) for streaming support'

    def add_arguments(self, parser):
        parser.add_argument('--host', default='127.0.0.1', help='Host to bind (default: 127.0.0.1)')
        parser.add_argument('--port', type=int, default=8000, help='Port to bind (default: 8000)')
        parser.add_argument('--no-reload', action='store_true', help='Disable auto-reload on code changes')

    def handle(self, *args, **options):
        host = options['host']
        port = options['port']

        self.stdout.write(self.style.SUCCESS(f'Serving planner assistant at http://{host}:{port}'))
        self.stdout.write('SSE endpoint: POST /api/chat/\n')

        uvicorn.run(
            'config.asgi:application',
            host=host,
            port=port,
            reload=not options['no_reload'],
            log_level='info',
        )
