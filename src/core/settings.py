"""generalised settings for the site-analytics project.

per-instance settings are in /path/to/app/app.cfg
example settings can be found in /path/to/app/example.cfg"""

import os
from os.path import join
import configparser
from pythonjsonlogger.json import JsonFormatter

PROJECT_NAME = 'site-analytics'

# Build paths inside the project like this: os.path.join(SRC_DIR, ...)
SRC_DIR = os.path.dirname(os.path.dirname(__file__)) # ll: /path/to/app/src/
PROJECT_DIR = os.path.dirname(SRC_DIR)

# cfg handling

CFG_NAME = 'app.cfg'
DYNCONFIG = configparser.ConfigParser(**{
    'allow_no_value': True,
    'defaults': {'dir': SRC_DIR, 'project': PROJECT_NAME}})
DYNCONFIG.read(join(PROJECT_DIR, CFG_NAME)) # ll: /path/to/app/app.cfg

def cfg(path, default=0xDEADBEEF):
    lu = {'True': True, 'true': True, 'False': False, 'false': False} # cast any obvious booleans
    try:
        val = DYNCONFIG.get(*path.split('.'))
        return lu.get(val, val)
    except (configparser.NoOptionError, configparser.NoSectionError): # given key in section hasn't been defined
        if default == 0xDEADBEEF:
            raise ValueError("no value/section set for setting at %r" % path)
        return default

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = cfg('general.secret-key', 'site-analytics-insecure-default')

DEBUG = cfg('general.debug', False)
assert isinstance(DEBUG, bool), "'debug' must be either True or False as a boolean, not %r" % (DEBUG, )

ALLOWED_HOSTS = list(filter(None, cfg('general.allowed-hosts', '').split(',')))

# Application definition

INSTALLED_APPS = (
    'site_analytics',
)

# Internationalization

LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'UTC'

USE_I18N = True

USE_TZ = True

#
# Google Analytics
#

# the view ('profile') reports are run against. may be overridden per-report.
ANALYTICS_VIEW_ID = os.getenv('ANALYTICS_VIEW_ID') or cfg('analytics.view-id', None)

# number of attempts made at a query before giving up when rate limited
GA_QUERY_ATTEMPTS = int(cfg('analytics.query-attempts', 5))

# existence is checked when the GA service is first built
GA_SECRETS_LOCATION = os.getenv(
    'GOOGLE_APPLICATION_CREDENTIALS',
    os.path.join(PROJECT_DIR, 'client-secrets.json')
)

#
# logging
#

LOG_FILE = cfg('general.log-file', None) or join(PROJECT_DIR, PROJECT_NAME + '.log')

# wherever our log files are, ensure they are writable before we do anything else.
def writable(path):
    open(path, 'a').close()
    assert os.access(path, os.W_OK), "file doesn't exist or isn't writable: %s" % path
writable(LOG_FILE)

ATTRS = ['asctime', 'created', 'levelname', 'message', 'filename', 'funcName', 'lineno', 'module', 'pathname']
FORMAT_STR = ' '.join(['%(' + v + ')s' for v in ATTRS])

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,

    'formatters': {
        'json': {
            '()': JsonFormatter,
            'format': FORMAT_STR,
        },
        'brief': {
            'format': '%(levelname)s - %(message)s'
        },
    },

    'handlers': {
        'analytics.log': {
            'level': 'DEBUG',
            'class': 'logging.FileHandler',
            'filename': LOG_FILE,
            'formatter': 'json',
        },

        'stderr': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'brief',
        },
    },

    'loggers': {
        '': {
            'handlers': ['stderr', 'analytics.log'],
            'level': 'INFO',
            'propagate': True,
        },
        'site_analytics.management.commands.analytics_report': {
            'level': 'INFO',
            'handlers': ['stderr'],
            'propagate': False,
        },
        'googleapiclient.discovery': {
            'level': 'WARN',
        },
    },
}
