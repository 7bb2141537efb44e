"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class AppRole(str, Enum):
    admin = "admin"
    mentor = "mentor"
    junior = "junior"


class ResourceType(str, Enum):
    pdf = "pdf"
    doc = "doc"
    video = "video"
    link = "link"
    other = "other"


class RoundType(str, Enum):
    aptitude = "aptitude"
    coding = "coding"
    technical = "technical"
    hr = "hr"
    general = "general"


class ResourceCategory(str, Enum):
    aptitude = "aptitude"
    coding = "coding"
    technical = "technical"
    hr = "hr"
    general = "general"
    communication = "communication"
    resume = "resume"
    other = "other"


class AnalyticsAction(str, Enum):
    download = "download"
    view = "view"
    bookmark = "bookmark"


class PreviewKind(str, Enum):
    youtube = "youtube"
    video = "video"
    iframe = "iframe"
    none = "none"


# ============================================================
# RESOURCE SCHEMAS
# ============================================================

class ResourceCreate(BaseModel):
    company_id: Optional[UUID] = None
    title: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = None
    resource_type: ResourceType
    round_type: RoundType
    category: Optional[ResourceCategory] = None
    folder_path: Optional[str] = None
    file_path: Optional[str] = None
    external_link: Optional[str] = None

class ResourceResponse(BaseModel):
    id: str
    company_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    resource_type: Optional[ResourceType] = None
    round_type: Optional[RoundType] = None
    category: Optional[ResourceCategory] = None
    folder_path: Optional[str] = None
    file_path: Optional[str] = None
    external_link: Optional[str] = None
    download_count: int = 0
    uploaded_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "ResourceResponse":
        return cls(
            id=row["id"], company_id=row.get("company_id"), title=row["title"],
            description=row.get("description"), resource_type=row.get("resource_type"),
            round_type=row.get("round_type"), category=row.get("category"),
            folder_path=row.get("folder_path"), file_path=row.get("file_path"),
            external_link=row.get("external_link"),
            download_count=row.get("download_count") or 0,
            uploaded_by=row.get("uploaded_by"), created_at=row.get("created_at")
        )

class DownloadResponse(BaseModel):
    resource_id: str
    external_link: Optional[str] = None
    file_path: Optional[str] = None
    download_count: int

class PreviewResponse(BaseModel):
    resource_id: str
    kind: PreviewKind
    title: str
    url: Optional[str] = None
    embed_url: Optional[str] = None


# ============================================================
# FOLDER SCHEMAS (General Resources browser)
# ============================================================

class FolderResponse(BaseModel):
    path: str
    display_name: str
    depth: int
    direct_count: int
    cumulative_count: int
    child_count: int

class BreadcrumbResponse(BaseModel):
    path: str
    name: str

class FolderListingResponse(BaseModel):
    path: str
    parent_path: Optional[str] = None
    breadcrumbs: List[BreadcrumbResponse] = []
    folders: List[FolderResponse] = []
    resources: List[ResourceResponse] = []
    direct_count: int
    cumulative_count: int


# ============================================================
# BOOKMARK SCHEMAS
# ============================================================

class BookmarkedResourceResponse(BaseModel):
    bookmark_id: str
    bookmarked_at: Optional[datetime] = None
    company_name: Optional[str] = None
    resource: ResourceResponse

class BookmarkListResponse(BaseModel):
    bookmarks: List[BookmarkedResourceResponse]
    total: int


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    is_featured: bool = False

class CompanyResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    is_featured: bool = False
    created_at: Optional[datetime] = None

class CompanyDetailResponse(BaseModel):
    company: CompanyResponse
    resources: List[ResourceResponse] = []
    bookmarked_resource_ids: List[str] = []


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class LeaderboardEntry(BaseModel):
    resource: ResourceResponse
    effective_count: int

class AnalyticsSummaryResponse(BaseModel):
    total_downloads: int
    total_views: int
    total_bookmarks: int
    events_available: bool = True
    top: List[LeaderboardEntry] = []


# ============================================================
# ANNOUNCEMENT SCHEMAS
# ============================================================

class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1)
    is_pinned: bool = False

class AnnouncementResponse(BaseModel):
    id: str
    title: str
    content: str
    is_pinned: bool = False
    posted_by: Optional[str] = None
    posted_by_name: Optional[str] = None
    created_at: Optional[datetime] = None


# ============================================================
# FORUM SCHEMAS
# ============================================================

class ForumPostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1)

class ForumReplyCreate(BaseModel):
    content: str = Field(..., min_length=1)

class ForumReplyResponse(BaseModel):
    id: str
    post_id: str
    content: str
    author_id: Optional[str] = None
    author_name: Optional[str] = None
    author_roles: List[str] = []
    created_at: Optional[datetime] = None

class ForumPostResponse(BaseModel):
    id: str
    title: str
    content: str
    author_id: Optional[str] = None
    author_name: Optional[str] = None
    author_roles: List[str] = []
    created_at: Optional[datetime] = None
    replies: List[ForumReplyResponse] = []


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class RoleAssignment(BaseModel):
    role: AppRole

class AccountStatusUpdate(BaseModel):
    is_active: bool

class UserResponse(BaseModel):
    user_id: str
    email: str
    full_name: Optional[str] = None
    is_active: bool = True
    roles: List[str] = []
    created_at: Optional[datetime] = None


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True