"""
This file contains all the settings used in production.

This file is required and if development.py is present these
values are overridden.
"""

from typing import Final

from server.settings.components import config

DEBUG = False

SECRET_KEY = config('DJANGO_SECRET_KEY')

ALLOWED_HOSTS: Final = (
    config('DOMAIN_NAME'),
)

SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
