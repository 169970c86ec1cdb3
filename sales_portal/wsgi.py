"""WSGI entrypoint: gunicorn sales_portal.wsgi:application -c gunicorn.conf.py"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "sales_portal.settings.prod")

application = get_wsgi_application()
