#!/usr/bin/env python
"""
    Outcome Schema for Meeple: the single result value every
    reconciliation entry point hands back to its caller.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import enum
from pydantic import BaseModel
from typing import List, Optional


class OutcomeKind(str, enum.Enum):
    RETURNED = "returned"
    BORROWED = "borrowed"
    NOT_CURRENTLY_BORROWED = "not_currently_borrowed"
    INVALID_ID_FORMAT = "invalid_id_format"
    IDENTITY_MISMATCH = "identity_mismatch"
    INVALID_BORROWER = "invalid_borrower"
    EMPTY_SELECTION = "empty_selection"
    ITEM_NOT_FOUND = "item_not_found"
    CONNECTION_ERROR = "connection_error"
    RETURN_REJECTED = "return_rejected"
    BORROW_BLOCKED = "borrow_blocked"
    BORROW_REJECTED = "borrow_rejected"


SUCCESSES = {OutcomeKind.RETURNED, OutcomeKind.BORROWED}
INFORMATIONAL = {OutcomeKind.NOT_CURRENTLY_BORROWED}


class Outcome(BaseModel):

    kind: OutcomeKind
    message: str
    token: Optional[str] = None
    game_name: Optional[str] = None
    student_id: Optional[str] = None
    games: List[str] = []
    candidates: int = 0
    other_borrowers: List[str] = []

    @property
    def ok(self) -> bool:
        return self.kind in SUCCESSES

    @property
    def severity(self) -> str:
        """`success`, `info` or `error`; a game that is simply on the
        shelf is not a fault."""
        if self.kind in SUCCESSES:
            return "success"
        if self.kind in INFORMATIONAL:
            return "info"
        return "error"

    @property
    def is_ambiguous(self) -> bool:
        return self.candidates > 1
