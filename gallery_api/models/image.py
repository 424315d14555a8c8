from pydantic import BaseModel, Field, constr
from typing import Optional, List, Dict, Any

class BulkMutationRequest(BaseModel):
    publicIds: List[constr(strict=True, min_length=1)] = Field(..., min_length=1)

class AdminImage(BaseModel):
    public_id: str
    secure_url: Optional[str] = None
    created_at: Optional[str] = None
    tags: List[str] = []
    width: Optional[int] = None
    height: Optional[int] = None
    approved: bool = False

class PublicImage(BaseModel):
    public_id: str
    secure_url: Optional[str] = None
    created_at: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None

class EventFolder(BaseModel):
    name: str
    path: str

class BulkOutcome(BaseModel):
    public_id: str
    result: Dict[str, Any] = {}

class AdminImageListResponse(BaseModel):
    success: bool
    event: str
    total: int
    images: List[AdminImage]

class PublicImageListResponse(BaseModel):
    success: bool
    event: str
    total: int
    images: List[PublicImage]

class EventFolderListResponse(BaseModel):
    success: bool
    total: int
    folders: List[EventFolder]

class ApproveResponse(BaseModel):
    success: bool
    approved: int
    results: List[BulkOutcome]

class UnapproveResponse(BaseModel):
    success: bool
    unapproved: int
    results: List[BulkOutcome]

class DeleteResponse(BaseModel):
    success: bool
    deleted: int
    results: List[BulkOutcome]

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    kind: str
