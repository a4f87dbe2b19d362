#!/usr/bin/env python

"""
    Ledger gateway for Meeple, the only code that talks to the
    spreadsheet ledger web app.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import json
import logging
from typing import List, Optional, Sequence

import httpx
from pydantic import ValidationError
from meeple.configs import LEDGER_URL, LEDGER_TIMEOUT, MEEPLE_HTTP_HEADERS
from meeple.core.exceptions import (
    BorrowBlockedError,
    LedgerRejectedError,
    LedgerTransportError,
    ReturnNotFoundError,
)
from meeple.schemas.loan import BorrowerInfo, ItemStatus, LoanRecord

logger = logging.getLogger(__name__)

STATUS_TAGS = {"success", "error", "not_found", "blocked", "borrowed", "available"}


class LedgerGateway:
    """Async client for the ledger's GET/POST contract.

    Reads are GETs with an `action` query parameter, writes are POSTs of
    a JSON body sent as text/plain (the web app redirects, so redirects
    are followed). Every response is `{"status": <tag>, ...}`.
    Nothing is retried here.
    """

    HTTP_HEADERS = MEEPLE_HTTP_HEADERS
    POST_HEADERS = {"Content-Type": "text/plain;charset=utf-8"}
    BORROW_CONFLICT = "Some of these games were just borrowed by someone else."
    BORROW_PARTIAL = "Some games could not be recorded."

    def __init__(self, url: str = LEDGER_URL, timeout: float = LEDGER_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.HTTP_HEADERS,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        )

    @staticmethod
    def _parse(response: httpx.Response) -> dict:
        try:
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            raise LedgerTransportError(f"Ledger answered HTTP {e.response.status_code}")
        except ValueError as e:
            raise LedgerTransportError(f"Ledger sent a malformed response: {e}")
        if not isinstance(result, dict) or result.get("status") not in STATUS_TAGS:
            raise LedgerTransportError(f"Ledger sent an unrecognized response: {result!r}")
        if result.get("message") is not None and not isinstance(result["message"], str):
            result["message"] = str(result["message"])
        return result

    async def _get(self, **params) -> dict:
        logger.debug(f"GET ledger {params}")
        try:
            async with self._client() as client:
                response = await client.get(self.url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Error reaching ledger ({params.get('action')}): {e}")
            raise LedgerTransportError(f"Could not reach the ledger: {e}")
        return self._parse(response)

    async def _post(self, payload: dict) -> dict:
        logger.debug(f"POST ledger {payload.get('action')} {payload.get('Board_Game')}")
        try:
            async with self._client() as client:
                response = await client.post(
                    self.url,
                    content=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                    headers=self.POST_HEADERS,
                )
        except httpx.HTTPError as e:
            logger.error(f"Error posting {payload.get('action')} to ledger: {e}")
            raise LedgerTransportError(f"Could not reach the ledger: {e}")
        return self._parse(response)

    async def _fetch_records(self, action: str) -> List[LoanRecord]:
        result = await self._get(action=action)
        if result["status"] != "success":
            raise LedgerRejectedError(
                result.get("message") or f"Ledger refused '{action}'", status=result["status"])
        items = result.get("items") or []
        if not isinstance(items, list):
            raise LedgerTransportError(f"Ledger '{action}' items is not a list")
        try:
            return [LoanRecord.model_validate(item) for item in items]
        except ValidationError as e:
            raise LedgerTransportError(f"Ledger '{action}' returned unreadable records: {e}")

    async def fetch_active_loans(self) -> List[LoanRecord]:
        """Loans with no return time, in the ledger's own order."""
        return [r for r in await self._fetch_records("get_borrowed") if r.is_active]

    async def fetch_all_transactions(self) -> List[LoanRecord]:
        """Full borrow history, newest first."""
        return await self._fetch_records("get_all_transactions")

    async def check_item(self, game_name: str) -> ItemStatus:
        result = await self._get(action="check", Board_Game=game_name)
        status = result["status"]
        if status not in ("borrowed", "available"):
            raise LedgerRejectedError(
                result.get("message") or f"Could not check '{game_name}'", status=status)
        try:
            return ItemStatus(
                game_name=result.get("boardGame") or game_name,
                borrowed=status == "borrowed",
                borrowers=result.get("borrowers") or [],
                message=result.get("message"),
            )
        except ValidationError as e:
            raise LedgerTransportError(f"Ledger check for '{game_name}' was unreadable: {e}")

    async def submit_borrow(self, borrower: BorrowerInfo, item_names: Sequence[str],
                            item_ids: Optional[Sequence[Optional[int]]] = None):
        """Writes one ledger row per game, in the order given.

        Rows already written stay written if a later one fails; the
        ledger has no transaction spanning several games.
        """
        item_ids = list(item_ids) if item_ids is not None else [None] * len(item_names)
        statuses = []
        for name, item_id in zip(item_names, item_ids):
            payload = {
                "action": "borrow",
                "Student_ID": borrower.student_id.strip(),
                "Classroom": borrower.classroom.strip(),
                "Player_Count": borrower.number_of_players.strip(),
                "Major": borrower.major,
                "Board_Game": name,
            }
            if item_id is not None:
                payload["Item_ID"] = item_id
            result = await self._post(payload)
            logger.info(f"Borrow '{name}' for {payload['Student_ID']}: {result['status']}")
            statuses.append(result["status"])

        if "blocked" in statuses:
            raise BorrowBlockedError(self.BORROW_CONFLICT, status="blocked")
        if any(status != "success" for status in statuses):
            raise LedgerRejectedError(self.BORROW_PARTIAL, status="error")

    async def submit_return(self, student_id: str, game_name: str,
                            item_id: Optional[int] = None) -> str:
        payload = {
            "action": "return",
            "Student_ID": student_id.strip(),
            "Board_Game": game_name,
        }
        if item_id is not None:
            payload["Item_ID"] = item_id
        result = await self._post(payload)
        status = result["status"]
        message = result.get("message")
        logger.info(f"Return '{game_name}' for {payload['Student_ID']}: {status}")
        if status == "success":
            return message or "Game returned."
        if status == "not_found":
            raise ReturnNotFoundError(
                message or f"No active loan of '{game_name}' for {student_id}.", status=status)
        raise LedgerRejectedError(message or "The ledger refused this return.", status=status)
