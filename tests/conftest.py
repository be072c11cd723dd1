"""
Shared test setup: minimal Django settings so PolicyFrameworkSettings
can read POLICY_FRAMEWORK without a project settings module.
"""

import django
from django.conf import settings


def pytest_configure(config):
    if not settings.configured:
        settings.configure(
            INSTALLED_APPS=[],
            USE_TZ=True,
            TIME_ZONE="UTC",
            POLICY_FRAMEWORK={},
        )
        django.setup()
