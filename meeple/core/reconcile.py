#!/usr/bin/env python

"""
    Reconciliation engine for Meeple: drives borrow and return
    transitions between the local catalog and the remote ledger.

    Per (game, borrower) a loan goes NoActiveLoan -> ActiveLoan ->
    Returned, with no pending state in between. Every public coroutine
    returns an Outcome; ledger and validation errors never escape.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from meeple.configs import STUDENT_ID_LENGTH
from meeple.core.catalog import Catalog
from meeple.core.ledger import LedgerGateway
from meeple.core.exceptions import (
    BorrowBlockedError,
    EmptySelectionError,
    IdentityMismatchError,
    InvalidBorrowerError,
    InvalidIdFormatError,
    ItemNotFoundError,
    LedgerRejectedError,
    LedgerTransportError,
)
from meeple.schemas.catalog import CatalogItem
from meeple.schemas.loan import BorrowerInfo, LoanRecord
from meeple.schemas.outcome import Outcome, OutcomeKind

logger = logging.getLogger(__name__)


class ReconciliationEngine:

    def __init__(self, catalog: Catalog, ledger: LedgerGateway,
                 id_length: int = STUDENT_ID_LENGTH):
        self.catalog = catalog
        self.ledger = ledger
        self.id_length = id_length
        # one ledger write in flight per client; later calls queue
        self._guard = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._guard.locked()

    def check_id_format(self, student_id: Optional[str]) -> str:
        student_id = (student_id or "").strip()
        if len(student_id) != self.id_length or not (student_id.isascii() and student_id.isdigit()):
            raise InvalidIdFormatError(
                f"Student ID must be exactly {self.id_length} digits.")
        return student_id

    def check_borrower(self, borrower: BorrowerInfo) -> BorrowerInfo:
        if not all([borrower.student_id, borrower.classroom,
                    borrower.number_of_players, borrower.major]):
            raise InvalidBorrowerError("Please fill in every field.")
        student_id = self.check_id_format(borrower.student_id)
        for label, value in (("Classroom", borrower.classroom),
                             ("Number of players", borrower.number_of_players)):
            if not (value.isascii() and value.isdigit()):
                raise InvalidBorrowerError(f"{label} must be a number.")
        return borrower.model_copy(update={"student_id": student_id})

    @staticmethod
    def match_loans(item: CatalogItem, loans: Sequence[LoanRecord]) -> List[LoanRecord]:
        """Active loans for `item` in ledger order, matched on the game
        name. Catalog ids differ between terminals and get reused, so a
        loan's item id only narrows several same-name loans down, it
        never matches on its own."""
        name = item.name.strip().casefold()
        matches = [loan for loan in loans if loan.game_name.strip().casefold() == name]
        same_id = [loan for loan in matches if loan.item_id == item.id]
        return same_id or matches

    async def borrow(self, borrower: BorrowerInfo,
                     items: Optional[Sequence[CatalogItem]] = None) -> Outcome:
        """Records a borrow for `items`, or for the catalog's cart when
        no items are given. The cart is cleared only on success."""
        async with self._guard:
            items = list(self.catalog.selected if items is None else items)
            names = [i.name for i in items]
            try:
                if not items:
                    raise EmptySelectionError("Select at least one game.")
                borrower = self.check_borrower(borrower)
                await self.ledger.submit_borrow(borrower, names, [i.id for i in items])
            except EmptySelectionError as e:
                return Outcome(kind=OutcomeKind.EMPTY_SELECTION, message=str(e))
            except InvalidIdFormatError as e:
                return Outcome(kind=OutcomeKind.INVALID_ID_FORMAT, message=str(e), games=names)
            except InvalidBorrowerError as e:
                return Outcome(kind=OutcomeKind.INVALID_BORROWER, message=str(e), games=names)
            except BorrowBlockedError as e:
                logger.warning(f"Borrow of {names} blocked: {e}")
                return Outcome(kind=OutcomeKind.BORROW_BLOCKED, message=str(e),
                               student_id=borrower.student_id, games=names)
            except LedgerRejectedError as e:
                return Outcome(kind=OutcomeKind.BORROW_REJECTED, message=str(e),
                               student_id=borrower.student_id, games=names)
            except LedgerTransportError as e:
                return self._connection_error(e, student_id=borrower.student_id, games=names)

            for item in items:
                if item.id in self.catalog:
                    self.catalog.select(item.id, False)
            logger.info(f"{borrower.student_id} borrowed {names}")
            return Outcome(kind=OutcomeKind.BORROWED, message="Borrow recorded.",
                           student_id=borrower.student_id, games=names)

    async def manual_return(self, loan: LoanRecord, entered_id: str) -> Outcome:
        """Borrower-driven return of a loan picked from the active list,
        confirmed by re-entering the student ID on that loan."""
        async with self._guard:
            try:
                entered_id = self.check_id_format(entered_id)
                if entered_id != loan.student_id.strip():
                    raise IdentityMismatchError(
                        "Student ID does not match this loan. Please check and try again.")
                message = await self.ledger.submit_return(entered_id, loan.game_name, loan.item_id)
            except InvalidIdFormatError as e:
                return Outcome(kind=OutcomeKind.INVALID_ID_FORMAT, message=str(e),
                               game_name=loan.game_name)
            except IdentityMismatchError as e:
                return Outcome(kind=OutcomeKind.IDENTITY_MISMATCH, message=str(e),
                               game_name=loan.game_name)
            except LedgerRejectedError as e:
                return Outcome(kind=OutcomeKind.RETURN_REJECTED, message=str(e),
                               game_name=loan.game_name, student_id=entered_id)
            except LedgerTransportError as e:
                return self._connection_error(e, game_name=loan.game_name)
            logger.info(f"{entered_id} returned '{loan.game_name}'")
            return Outcome(kind=OutcomeKind.RETURNED, message=message,
                           game_name=loan.game_name, student_id=entered_id)

    async def auto_return(self, token: str) -> Outcome:
        """Returns whatever active loan matches a scanned token. Handing
        back the physical game is the authorization; the borrower is
        taken from the ledger and reported for staff to audit."""
        async with self._guard:
            try:
                item = self.catalog.resolve(token)
            except ItemNotFoundError as e:
                logger.info(f"Scan '{token}' matched no catalog item")
                return Outcome(kind=OutcomeKind.ITEM_NOT_FOUND, message=str(e), token=token)

            try:
                matches = self.match_loans(item, await self.ledger.fetch_active_loans())
            except (LedgerTransportError, LedgerRejectedError) as e:
                return self._connection_error(e, token=token, game_name=item.name)

            if not matches:
                return Outcome(kind=OutcomeKind.NOT_CURRENTLY_BORROWED, token=token,
                               game_name=item.name,
                               message=f"'{item.name}' is not currently borrowed.")

            loan, others = matches[0], matches[1:]
            if others:
                logger.warning(
                    f"Scan '{token}' matched {len(matches)} active loans of '{item.name}'; "
                    f"returning the one held by {loan.student_id}")
            details = dict(token=token, game_name=loan.game_name, student_id=loan.student_id,
                           candidates=len(matches),
                           other_borrowers=[o.student_id for o in others])
            try:
                message = await self.ledger.submit_return(
                    loan.student_id, loan.game_name, loan.item_id)
            except LedgerRejectedError as e:
                return Outcome(kind=OutcomeKind.RETURN_REJECTED, message=str(e), **details)
            except LedgerTransportError as e:
                return self._connection_error(e, **details)
            logger.info(f"Scan '{token}' returned '{loan.game_name}' for {loan.student_id}")
            return Outcome(kind=OutcomeKind.RETURNED, message=message, **details)

    async def return_many(self, student_id: str, game_names: Sequence[str]) -> Outcome:
        """Returns several games for one borrower, one at a time, stopping
        at the first game the ledger refuses."""
        async with self._guard:
            names = list(game_names)
            if not names:
                return Outcome(kind=OutcomeKind.EMPTY_SELECTION,
                               message="Select at least one game to return.")
            try:
                student_id = self.check_id_format(student_id)
            except InvalidIdFormatError as e:
                return Outcome(kind=OutcomeKind.INVALID_ID_FORMAT, message=str(e), games=names)
            returned = []
            for name in names:
                try:
                    await self.ledger.submit_return(student_id, name)
                except LedgerRejectedError as e:
                    return Outcome(kind=OutcomeKind.RETURN_REJECTED, message=str(e),
                                   game_name=name, student_id=student_id, games=returned)
                except LedgerTransportError as e:
                    return self._connection_error(
                        e, game_name=name, student_id=student_id, games=returned)
                returned.append(name)
            return Outcome(kind=OutcomeKind.RETURNED, message="Games returned.",
                           student_id=student_id, games=returned)

    @staticmethod
    def _connection_error(error, **details) -> Outcome:
        logger.error(f"Ledger unavailable: {error}")
        return Outcome(kind=OutcomeKind.CONNECTION_ERROR,
                       message=f"Connection problem, please try again. ({error})", **details)
