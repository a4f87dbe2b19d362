#!/usr/bin/env python

"""
    API routes for Meeple: the catalog, borrow cart, loans and the
    borrow/return/scan entry points of the reconciliation engine.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from typing import Optional
from fastapi import (
    APIRouter,
    Header,
    HTTPException,
    status,
)
from fastapi.responses import JSONResponse
from meeple.core import catalog, ledger, engine, scanner
from meeple.core.auth import check_passcode
from meeple.core.scanner import KeyEvent
from meeple.core.exceptions import (
    ItemNotFoundError,
    LedgerRejectedError,
    LedgerTransportError,
    PasscodeError,
)
from meeple.routes.schemas import (
    BulkReturnRequest,
    DeleteRequest,
    KeyResponse,
    ManualReturnRequest,
    ScanRequest,
)
from meeple.schemas.catalog import CatalogItemIn
from meeple.schemas.loan import BorrowerInfo
from meeple.schemas.outcome import Outcome, OutcomeKind

router = APIRouter()

OUTCOME_STATUS = {
    OutcomeKind.RETURNED: status.HTTP_200_OK,
    OutcomeKind.BORROWED: status.HTTP_201_CREATED,
    OutcomeKind.NOT_CURRENTLY_BORROWED: status.HTTP_200_OK,
    OutcomeKind.INVALID_ID_FORMAT: status.HTTP_400_BAD_REQUEST,
    OutcomeKind.INVALID_BORROWER: status.HTTP_400_BAD_REQUEST,
    OutcomeKind.EMPTY_SELECTION: status.HTTP_400_BAD_REQUEST,
    OutcomeKind.IDENTITY_MISMATCH: status.HTTP_403_FORBIDDEN,
    OutcomeKind.ITEM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    OutcomeKind.RETURN_REJECTED: status.HTTP_409_CONFLICT,
    OutcomeKind.BORROW_BLOCKED: status.HTTP_409_CONFLICT,
    OutcomeKind.BORROW_REJECTED: status.HTTP_409_CONFLICT,
    OutcomeKind.CONNECTION_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def outcome_response(outcome: Outcome) -> JSONResponse:
    content = outcome.model_dump(mode="json")
    content["severity"] = outcome.severity
    return JSONResponse(status_code=OUTCOME_STATUS[outcome.kind], content=content)


def requires_passcode(passcode: Optional[str]):
    try:
        check_passcode(passcode)
    except PasscodeError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


def _item_or_404(item_id: int):
    try:
        return catalog.get(item_id)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


async def _read_ledger(fetch):
    try:
        return await fetch()
    except (LedgerTransportError, LedgerRejectedError) as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

# Catalog

@router.get("/catalog")
async def get_catalog(q: Optional[str] = None, popular: bool = False):
    items = catalog.popular() if popular else catalog.search(q or "")
    return [i.model_dump(by_alias=True) for i in items]

@router.get("/catalog/{item_id}")
async def get_catalog_item(item_id: int):
    return _item_or_404(item_id).model_dump(by_alias=True)

@router.post("/catalog", status_code=status.HTTP_201_CREATED)
async def add_catalog_item(data: CatalogItemIn,
                           x_admin_passcode: Optional[str] = Header(None)):
    requires_passcode(x_admin_passcode)
    return catalog.add(data).model_dump(by_alias=True)

@router.put("/catalog/{item_id}")
async def update_catalog_item(item_id: int, data: CatalogItemIn,
                              x_admin_passcode: Optional[str] = Header(None)):
    requires_passcode(x_admin_passcode)
    _item_or_404(item_id)
    return catalog.update(item_id, data).model_dump(by_alias=True)

@router.delete("/catalog")
async def delete_catalog_items(data: DeleteRequest,
                               x_admin_passcode: Optional[str] = Header(None)):
    requires_passcode(x_admin_passcode)
    return {"deleted": catalog.delete(data.ids)}

@router.post("/catalog/reset")
async def reset_catalog(x_admin_passcode: Optional[str] = Header(None)):
    requires_passcode(x_admin_passcode)
    catalog.reset()
    return {"count": len(catalog)}

# Borrow cart

@router.post("/catalog/{item_id}/select")
async def toggle_select(item_id: int):
    _item_or_404(item_id)
    return catalog.toggle_select(item_id).model_dump(by_alias=True)

@router.get("/cart")
async def get_cart():
    return [i.model_dump(by_alias=True) for i in catalog.selected]

@router.delete("/cart")
async def clear_cart():
    catalog.clear_selection()
    return []

# Ledger reads

@router.get("/loans")
async def get_active_loans():
    loans = await _read_ledger(ledger.fetch_active_loans)
    return [loan.model_dump(by_alias=True) for loan in loans]

@router.get("/transactions")
async def get_transactions():
    loans = await _read_ledger(ledger.fetch_all_transactions)
    return [loan.model_dump(by_alias=True) for loan in loans]

@router.get("/status/{game_name}")
async def get_item_status(game_name: str):
    result = await _read_ledger(lambda: ledger.check_item(game_name))
    return result.model_dump(by_alias=True)

# Borrow and return

@router.post("/borrow")
async def borrow(borrower: BorrowerInfo):
    """Borrows the named games, or the cart when no games are named."""
    items = None
    if borrower.games:
        items = []
        for name in borrower.games:
            if not (item := catalog.by_name(name)):
                return outcome_response(Outcome(
                    kind=OutcomeKind.ITEM_NOT_FOUND, token=name,
                    message=f"No catalog item matches '{name}'."))
            items.append(item)
    return outcome_response(await engine.borrow(borrower, items))

@router.post("/returns")
async def manual_return(data: ManualReturnRequest):
    return outcome_response(await engine.manual_return(data.loan, data.student_id))

@router.post("/returns/bulk")
async def bulk_return(data: BulkReturnRequest):
    return outcome_response(await engine.return_many(data.student_id, data.games))

@router.post("/scan")
async def scan(data: ScanRequest):
    return outcome_response(await engine.auto_return(data.token.strip()))

@router.post("/scan/keys", response_model=KeyResponse)
async def scan_key(event: KeyEvent):
    outcome = await scanner.on_key(event)
    return KeyResponse(
        state=scanner.state.value,
        buffered=len(scanner.buffer),
        outcome=None if outcome is None else {
            **outcome.model_dump(mode="json"), "severity": outcome.severity},
    )
