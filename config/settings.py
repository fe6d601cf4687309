"""
Django settings for the Banking Calculators suite.

Configuration with environment variable support. The calculation engines
read their defaults from here; nothing in this project serves HTTP or
touches a database.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Turns on DEBUG logging for the calculation apps
DEBUG = os.environ.get('DEBUG', 'False').lower() in ('true', '1', 'yes')

# Application definition
INSTALLED_APPS = [
    # Third-party
    'rest_framework',

    # Local apps
    'apps.core',
    'apps.loans',
    'apps.deposits',
    'apps.msme',
    'apps.shg',
]

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Asia/Kolkata'
USE_I18N = True
USE_TZ = True

# Django REST Framework (serializers are used for validation and
# representation only)
REST_FRAMEWORK = {
    'NON_FIELD_ERRORS_KEY': 'errors',
}

# Calculation defaults
DEFAULT_REPAYMENT_METHOD = os.environ.get('DEFAULT_REPAYMENT_METHOD', 'reducing')

# 4 = quarterly, 12 = monthly, 1 = annual
DEFAULT_COMPOUNDING_FREQUENCY = int(os.environ.get('DEFAULT_COMPOUNDING_FREQUENCY', '4'))

# Validation limits
LOAN_MAX_TENURE_MONTHS = int(os.environ.get('LOAN_MAX_TENURE_MONTHS', '600'))
DEPOSIT_MAX_TENURE_MONTHS = int(os.environ.get('DEPOSIT_MAX_TENURE_MONTHS', '1200'))

# Upper bound (% p.a.) searched when solving a loan's rate from its EMI
REVERSE_RATE_CEILING = int(os.environ.get('REVERSE_RATE_CEILING', '500'))

# SHG interest slabs: (upper limit inclusive, annual rate %)
SHG_DEFAULT_SLABS = [
    (300000, '7'),
    (500000, '8.85'),
    (10000000, '11'),
]

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': 'DEBUG' if DEBUG else LOG_LEVEL,
            'propagate': False,
        },
    },
}
