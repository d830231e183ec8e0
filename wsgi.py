"""
WSGI entry point for the Park Sync trigger API.

Usage:
    gunicorn --bind 127.0.0.1:5001 --timeout 300 wsgi:application

The import and sync endpoints run their jobs inline, so the worker timeout
must cover a full pass over every configured park.
"""

from pathlib import Path

from dotenv import load_dotenv

# .env next to this file wins over one in the working directory
load_dotenv(Path(__file__).resolve().parent / '.env')

from parksync.api.app import create_app  # noqa: E402
from parksync.container import Container  # noqa: E402

container = Container()
application = create_app(container)
