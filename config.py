"""
Configuration for the fax CDR service.

Reads from environment variables:
- XFERFAXLOG: Path of the HylaFAX-style xferfaxlog file (empty disables it)
- XFERFAXLOG_TS_FORMAT: strftime layout of the log timestamp
- CDR_DATABASE_URL: Full SQLAlchemy URL, overrides the MYSQL_* settings
- MYSQL_HOST, MYSQL_PORT, MYSQL_USER, MYSQL_PASS, MYSQL_DATABASE, MYSQL_CHARSET:
  Relational CDR store (all empty disables it)
"""

import os

from sqlalchemy.engine import URL

# HylaFAX writes "01/02/06 15:04"
DEFAULT_TS_FORMAT = '%m/%d/%y %H:%M'


class Config:
    def __init__(self, environ=None):
        env = os.environ if environ is None else environ

        # ===== XFERFAXLOG FILE =====
        self.XFERFAXLOG = env.get('XFERFAXLOG', '')
        self.XFERFAXLOG_TS_FORMAT = env.get('XFERFAXLOG_TS_FORMAT', '') or DEFAULT_TS_FORMAT

        # ===== RELATIONAL CDR STORE =====
        # Vercel-style URLs start with "postgres://", SQLAlchemy needs "postgresql://"
        raw_url = env.get('CDR_DATABASE_URL', '')
        if raw_url.startswith('postgres://'):
            raw_url = raw_url.replace('postgres://', 'postgresql://', 1)
        self.DATABASE_URL = raw_url

        self.MYSQL_HOST = env.get('MYSQL_HOST', '')
        self.MYSQL_PORT = env.get('MYSQL_PORT', '') or '3306'
        self.MYSQL_USER = env.get('MYSQL_USER', '')
        self.MYSQL_PASS = env.get('MYSQL_PASS', '')
        self.MYSQL_DATABASE = env.get('MYSQL_DATABASE', '')
        self.MYSQL_CHARSET = env.get('MYSQL_CHARSET', '') or 'utf8'
        self.MYSQL_DRIVER = env.get('MYSQL_DRIVER', '') or 'mysql+pymysql'

        # ===== FLASK =====
        self.FLASK_ENV = env.get('FLASK_ENV', 'production')
        self.FLASK_DEBUG = env.get('FLASK_DEBUG', 'False').lower() == 'true'
        self.LOG_LEVEL = env.get('LOG_LEVEL', 'INFO').upper()

    @property
    def xferfaxlog_enabled(self):
        return bool(self.XFERFAXLOG)

    @property
    def database_enabled(self):
        if self.DATABASE_URL:
            return True
        return any((self.MYSQL_HOST, self.MYSQL_USER, self.MYSQL_PASS, self.MYSQL_DATABASE))

    def database_url(self):
        """SQLAlchemy URL of the CDR store, or None when it is not configured."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if not self.database_enabled:
            return None
        return URL.create(
            self.MYSQL_DRIVER,
            username=self.MYSQL_USER or None,
            password=self.MYSQL_PASS or None,
            host=self.MYSQL_HOST or None,
            port=int(self.MYSQL_PORT),
            database=self.MYSQL_DATABASE or None,
            query={'charset': self.MYSQL_CHARSET},
        )


def get_config(environ=None):
    return Config(environ)
