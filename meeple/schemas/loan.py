#!/usr/bin/env python
"""
    Loan Schemas for Meeple: ledger records as read back from the
    spreadsheet ledger, and the borrower details sent with a borrow.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


def _as_text(value):
    # Spreadsheet cells come back as numbers when they look like numbers
    if value is None:
        return None
    return str(value).strip()


class LoanRecord(BaseModel):

    game_name: str = Field(alias="gameName")
    student_id: str = Field(alias="studentId")
    classroom: Optional[str] = ""
    major: Optional[str] = ""
    player_count: Optional[str] = Field(None, alias="playerCount")
    status: Optional[str] = None
    borrow_timestamp: Optional[str] = Field(None, alias="borrowTimestamp")
    date: Optional[str] = None
    borrow_time: Optional[str] = Field(None, alias="borrowTime")
    return_time: Optional[str] = Field(None, alias="returnTime")
    item_id: Optional[int] = Field(None, alias="itemId")

    class Config:
        populate_by_name = True

    @field_validator(
        "game_name", "student_id", "classroom", "major", "player_count",
        "borrow_timestamp", "date", "borrow_time", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value)

    @field_validator("return_time", mode="before")
    @classmethod
    def blank_is_active(cls, value):
        value = _as_text(value)
        return value or None

    @field_validator("item_id", mode="before")
    @classmethod
    def blank_item_id(cls, value):
        if value in (None, ""):
            return None
        return value

    @property
    def is_active(self) -> bool:
        return self.return_time is None


class BorrowerInfo(BaseModel):

    student_id: str = Field(alias="studentId")
    classroom: str
    number_of_players: str = Field(alias="numberOfPlayers")
    major: str
    games: List[str] = []

    class Config:
        populate_by_name = True

    @field_validator("student_id", "classroom", "number_of_players", "major", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value) or ""


class Borrower(BaseModel):

    student_id: str = Field(alias="studentId")
    classroom: Optional[str] = ""

    class Config:
        populate_by_name = True

    @field_validator("student_id", "classroom", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value)


class ItemStatus(BaseModel):
    """Answer to a single-game availability check."""

    game_name: str = Field(alias="boardGame")
    borrowed: bool
    borrowers: List[Borrower] = []
    message: Optional[str] = None

    class Config:
        populate_by_name = True
