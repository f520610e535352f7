"""
Pydantic schemas for organization billing.
"""
from pydantic import BaseModel


class BillingLine(BaseModel):
    amount: int
    unit: float
    price: float


class BillingDetail(BaseModel):
    seats: BillingLine
    projects: BillingLine
    total: float


class BillingResponse(BaseModel):
    billing: BillingDetail
