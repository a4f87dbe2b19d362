from pydantic import BaseModel, Field
from typing import List, Optional
from meeple.schemas.loan import LoanRecord

class ScanRequest(BaseModel):
    token: str

class ManualReturnRequest(BaseModel):
    loan: LoanRecord
    student_id: str = Field(alias="studentId")

    class Config:
        populate_by_name = True

class BulkReturnRequest(BaseModel):
    student_id: str = Field(alias="studentId")
    games: List[str]

    class Config:
        populate_by_name = True

class DeleteRequest(BaseModel):
    ids: List[int]

class KeyResponse(BaseModel):
    state: str
    buffered: int
    outcome: Optional[dict] = None
