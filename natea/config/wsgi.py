"""
WSGI config for the Natea Fresh POS project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'natea.config.settings')

application = get_wsgi_application()
