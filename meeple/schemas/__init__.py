from meeple.schemas.catalog import CatalogItem, CatalogItemIn
from meeple.schemas.loan import BorrowerInfo, ItemStatus, LoanRecord
from meeple.schemas.outcome import Outcome, OutcomeKind

__all__ = [
    "CatalogItem", "CatalogItemIn", "BorrowerInfo", "ItemStatus",
    "LoanRecord", "Outcome", "OutcomeKind",
]
