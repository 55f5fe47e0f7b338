from pydantic import BaseModel

from kassa.schemas.transaction import SalesSummary


class ReportPreview(BaseModel):
    """Plain-text report, ready to copy and share."""
    filename: str
    content: str
    summary: SalesSummary
