from .base import *

DEBUG = True

# ======================================================================
# DEVELOPMENT-SPECIFIC SETTINGS
# ======================================================================

# No request throttling locally.
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []

LOGGING['loggers']['apps']['level'] = 'DEBUG'
