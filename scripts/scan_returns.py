#!/usr/bin/env python3
"""
Return games from a terminal: each line read from stdin (a keyboard
wedge scanner ends every code with Enter) is treated as one scan.
"""
import argparse
import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent))
load_dotenv()

from meeple.configs import CATALOG_PATH, LEDGER_URL
from meeple.core.catalog import Catalog
from meeple.core.ledger import LedgerGateway
from meeple.core.reconcile import ReconciliationEngine


async def run(engine, lines):
    for line in lines:
        token = line.strip()
        if not token:
            continue
        outcome = await engine.auto_return(token)
        who = f" [{outcome.student_id}]" if outcome.student_id else ""
        print(f"{outcome.severity.upper():7} {token}{who}: {outcome.message}")
        if outcome.is_ambiguous:
            print(f"        also on loan to: {', '.join(outcome.other_borrowers)}")


def main():
    parser = argparse.ArgumentParser(
        description="Read scanned codes from stdin and return the matching loans"
    )
    parser.add_argument("--ledger-url", default=LEDGER_URL, help="Ledger web app URL")
    parser.add_argument("--catalog", default=CATALOG_PATH, help="Catalog cache JSON file")
    args = parser.parse_args()

    engine = ReconciliationEngine(Catalog.load(args.catalog), LedgerGateway(args.ledger_url))
    try:
        asyncio.run(run(engine, sys.stdin))
    except KeyboardInterrupt:
        pass

if __name__ == "__main__":
    main()
