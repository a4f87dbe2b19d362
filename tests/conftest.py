import os

os.environ.setdefault("TESTING", "true")

import asyncio
import pytest
from meeple.core.catalog import Catalog
from meeple.core.exceptions import (
    BorrowBlockedError,
    LedgerRejectedError,
    LedgerTransportError,
    ReturnNotFoundError,
)
from meeple.core.reconcile import ReconciliationEngine
from meeple.schemas.loan import LoanRecord


class FakeLedger:
    """In-memory stand-in for LedgerGateway that behaves like the
    spreadsheet: returns flip the newest matching active row."""

    def __init__(self, loans=None, borrow_statuses=None):
        self.loans = [loan if isinstance(loan, LoanRecord) else LoanRecord.model_validate(loan)
                      for loan in (loans or [])]
        self.borrow_statuses = borrow_statuses
        self.calls = []
        self.offline = False
        # raised by reads or by writes only, for failures part way through
        self.fetch_error = None
        self.write_error = None
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def writes(self):
        return [c for c in self.calls if c[0] in ("borrow", "return")]

    async def _enter(self, *call):
        self.calls.append(call)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        if self.offline:
            raise LedgerTransportError("Could not reach the ledger: offline")
        if call[0] == "fetch" and self.fetch_error:
            raise self.fetch_error
        if call[0] != "fetch" and self.write_error:
            raise self.write_error

    async def fetch_active_loans(self):
        await self._enter("fetch")
        return [loan.model_copy() for loan in self.loans if loan.is_active]

    async def submit_return(self, student_id, game_name, item_id=None):
        await self._enter("return", student_id, game_name)
        for loan in reversed(self.loans):
            if (loan.is_active and loan.student_id == student_id
                    and loan.game_name == game_name):
                loan.return_time = "12:00:00"
                return "Game returned."
        raise ReturnNotFoundError("Incorrect student ID", status="not_found")

    async def submit_borrow(self, borrower, item_names, item_ids=None):
        await self._enter("borrow", borrower.student_id, list(item_names))
        if self.borrow_statuses and "blocked" in self.borrow_statuses:
            raise BorrowBlockedError("Some of these games were just borrowed by someone else.")
        if self.borrow_statuses and any(s != "success" for s in self.borrow_statuses):
            raise LedgerRejectedError("Some games could not be recorded.", status="error")
        for name, item_id in zip(item_names, item_ids or [None] * len(item_names)):
            self.loans.append(LoanRecord(
                game_name=name, student_id=borrower.student_id, item_id=item_id))


@pytest.fixture
def catalog():
    return Catalog([
        {"id": 1, "name": "Catan", "barcode": "007"},
        {"id": 2, "name": "Codenames", "barcode": "009"},
        {"id": 3, "name": "Splendor"},
    ])


@pytest.fixture
def fake_ledger():
    return FakeLedger()


@pytest.fixture
def engine(catalog, fake_ledger):
    return ReconciliationEngine(catalog, fake_ledger)
