#!/usr/bin/env python

"""
    Configurations for Meeple

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import os


# Determine environment
TESTING = os.getenv("TESTING", "false").lower() == "true"

# API server configuration
HOST = os.environ.get('MEEPLE_HOST', 'localhost')
PORT = int(os.environ.get('MEEPLE_PORT', 8080))
WORKERS = int(os.environ.get('MEEPLE_WORKERS', 1))
DEBUG = bool(int(os.environ.get('MEEPLE_DEBUG', 0)))
LOG_LEVEL = os.environ.get('MEEPLE_LOG_LEVEL', 'info')
CORS_ORIGINS = os.environ.get('MEEPLE_CORS_ORIGINS', 'http://localhost:3000').split(',')
MEEPLE_HTTP_HEADERS = {"User-Agent": "MeepleLedgerBot/1.0"}

OPTIONS = {
    'host': HOST,
    'port': PORT,
    'log_level': LOG_LEVEL,
    'reload': DEBUG,
    'workers': WORKERS,
}

# Ledger (deployed spreadsheet web app) configuration
LEDGER_URL = os.environ.get('MEEPLE_LEDGER_URL', 'http://localhost:8081/exec')
LEDGER_TIMEOUT = float(os.environ.get('MEEPLE_LEDGER_TIMEOUT', 15))

# Borrowing rules
STUDENT_ID_LENGTH = int(os.environ.get('MEEPLE_STUDENT_ID_LENGTH', 5))
MAJORS = [
    'Accounting',
    'Marketing',
    'Business Computing',
    'Foreign Languages',
]

# Barcode scanner keystroke buffer; 0 disables idle expiry
SCAN_IDLE_TIMEOUT = float(os.environ.get('MEEPLE_SCAN_IDLE_TIMEOUT', 2.0))

# Local catalog cache, never written while testing
CATALOG_PATH = None if TESTING else os.environ.get(
    'MEEPLE_CATALOG_PATH',
    os.path.join(os.path.expanduser('~'), '.meeple', 'catalog.json')
)

ADMIN_PASSCODE = os.environ.get('MEEPLE_ADMIN_PASSCODE', '')

__all__ = [
    'HOST', 'PORT', 'DEBUG', 'OPTIONS', 'TESTING', 'LEDGER_URL',
    'LEDGER_TIMEOUT', 'STUDENT_ID_LENGTH', 'SCAN_IDLE_TIMEOUT',
    'CATALOG_PATH', 'ADMIN_PASSCODE', 'MAJORS',
]
