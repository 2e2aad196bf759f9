from typing import List, Optional
from pydantic import BaseModel, Field


# ============================================================
# Requests
# ============================================================

class PackageRequest(BaseModel):
    item_id: str
    user: str
    language: Optional[str] = None
    version: Optional[int] = Field(default=None, ge=0)
    package_name: Optional[str] = None
    include_descendants: bool = False


# ============================================================
# Responses
# ============================================================

class PackageNameResponse(BaseModel):
    item_id: str
    package_name: str


class PackageResponse(BaseModel):
    path: str
    package_name: str
    entries: List[str]
    download_url: str
