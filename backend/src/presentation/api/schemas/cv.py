"""
CV Storage Response Schemas
"""
from datetime import datetime
from typing import List, Optional

from .base import CamelModel


class StoredCV(CamelModel):
    pdf_url: str
    latex_url: Optional[str] = None
    latex_content: Optional[str] = None
    filename: Optional[str] = None
    uploaded_at: Optional[datetime] = None


class CVStoreResponse(CamelModel):
    success: bool = True
    data: StoredCV
    message: Optional[str] = None


class CVDeleteResponse(CamelModel):
    success: bool = True
    deleted: List[str]
