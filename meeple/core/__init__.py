#!/usr/bin/env python

"""
    Core module for Meeple: the catalog, ledger gateway, engine and
    scan session shared by the running app

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from meeple.configs import CATALOG_PATH, LEDGER_URL
from meeple.core.catalog import Catalog
from meeple.core.ledger import LedgerGateway
from meeple.core.reconcile import ReconciliationEngine
from meeple.core.scanner import ScanSession

catalog = Catalog.load(CATALOG_PATH)
ledger = LedgerGateway(LEDGER_URL)
engine = ReconciliationEngine(catalog, ledger)
scanner = ScanSession(engine)

__all__ = ["catalog", "ledger", "engine", "scanner"]
