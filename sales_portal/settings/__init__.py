"""
Settings package initializer.

The actual settings module is selected via the `DJANGO_SETTINGS_MODULE`
environment variable. Local management commands default to the development
configuration (`sales_portal.settings.dev`); production entrypoints point to
`sales_portal.settings.prod` explicitly.
"""

from __future__ import annotations

import os

DEFAULT_SETTINGS_MODULE = "sales_portal.settings.dev"

os.environ.setdefault("DJANGO_SETTINGS_MODULE", DEFAULT_SETTINGS_MODULE)

__all__ = ["DEFAULT_SETTINGS_MODULE"]
