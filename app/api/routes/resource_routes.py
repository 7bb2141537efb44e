"""
Resource Routes

GET /resources/general - Browse General Resources folder tree
POST /resources - Create a resource (mentor/admin)
GET /resources/{id} - Get one resource
DELETE /resources/{id} - Delete a resource (mentor/admin)
POST /resources/{id}/download - Track download, return link/storage path
POST /resources/{id}/view - Track in-site view, return preview descriptor
POST /resources/{id}/bookmark - Bookmark resource (auth)
DELETE /resources/{id}/bookmark - Remove bookmark (auth)
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends, Query

from app.core.auth import get_current_user, get_optional_user, get_content_manager
from app.core.config import get_settings
from app.services.folder_tree import FolderTree, parent_path
from app.services.resource_service import get_resource_service
from app.services.event_log_service import ResourceEventService
from app.utils.preview import resolve_preview
from app.schemas.schemas import (
    ResourceCreate, ResourceResponse, FolderResponse, BreadcrumbResponse, FolderListingResponse,
    DownloadResponse, PreviewResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resources", tags=["Resources"])


def get_event_service() -> ResourceEventService:
    """Get event log service instance."""
    return ResourceEventService()


def _get_resource_or_404(resource_id: UUID) -> dict:
    resource = get_resource_service().get_resource(str(resource_id))
    if not resource:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource


@router.get("/general", response_model=FolderListingResponse)
async def browse_general_resources(
    path: str = Query("", description="Folder path, empty for the root")
):
    """
    Browse General Resources (resources not tied to a company).

    Returns the sub-folders directly under `path` with their cumulative
    resource counts, plus the resources living directly in `path`.
    The tree is rebuilt from the current rows on every request.
    """
    settings = get_settings()
    resources = get_resource_service().get_general_resources()
    tree = FolderTree(resources, collapse_empty_segments=settings.collapse_empty_folder_segments)

    if not tree.has_folder(path):
        raise HTTPException(status_code=404, detail=f"Folder '{path}' not found")
    if tree.is_root(path):
        path = ""

    folders = [
        FolderResponse(
            path=node.path, display_name=node.name, depth=node.depth,
            direct_count=node.direct_count, cumulative_count=node.cumulative_count,
            child_count=node.child_count
        ) for node in tree.list_children(path)
    ]

    return FolderListingResponse(
        path=path,
        parent_path=parent_path(path),
        breadcrumbs=[BreadcrumbResponse(**crumb) for crumb in tree.breadcrumbs(path)],
        folders=folders,
        resources=[ResourceResponse.from_row(r) for r in tree.list_direct_resources(path)],
        direct_count=tree.get_direct_count(path),
        cumulative_count=tree.get_cumulative_count(path)
    )




@router.post("", response_model=ResourceResponse, status_code=201)
async def create_resource(resource: ResourceCreate, user: dict = Depends(get_content_manager)):
    """
    Create a resource. Mentors and admins only.

    Needs a title and either a storage path or an external link. Without
    company_id it is a General Resource, placed by folder_path.
    """
    title = resource.title.strip()
    if not title:
        raise HTTPException(status_code=422, detail="Title is required")
    if not (resource.file_path or "").strip() and not (resource.external_link or "").strip():
        raise HTTPException(status_code=422, detail="Provide either a file or an external link")

    service = get_resource_service()
    if resource.company_id and not service.company_exists(str(resource.company_id)):
        raise HTTPException(status_code=404, detail="Company not found")

    data = resource.model_dump()
    data["title"] = title
    data["file_path"] = (resource.file_path or "").strip() or None
    data["external_link"] = (resource.external_link or "").strip() or None

    created = service.create_resource(data, uploaded_by=user["user_id"])
    return ResourceResponse.from_row(created)


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(resource_id: UUID):
    """Get a single resource."""
    return ResourceResponse.from_row(_get_resource_or_404(resource_id))


@router.delete("/{resource_id}", response_model=MessageResponse)
async def delete_resource(resource_id: UUID, user: dict = Depends(get_content_manager)):
    """Delete a resource. Mentors and admins only."""
    if not get_resource_service().delete_resource(str(resource_id)):
        raise HTTPException(status_code=404, detail="Resource not found")

    logger.info("Resource %s deleted by %s", resource_id, user["user_id"])
    return MessageResponse(message="Resource deleted")


@router.post("/{resource_id}/download", response_model=DownloadResponse)
async def download_resource(resource_id: UUID, user: Optional[dict] = Depends(get_optional_user)):
    """
    Track a download.

    Bumps the resource's download_count, then appends a `download` event.
    Returns the external link if there is one, otherwise the storage path
    (signed URLs are issued by the storage provider).
    """
    resource = _get_resource_or_404(resource_id)
    rid = str(resource_id)

    download_count = get_resource_service().increment_download_count(rid)
    if download_count is None:
        raise HTTPException(status_code=404, detail="Resource not found")

    # Recorded only once the counter update has found the row
    get_event_service().record(rid, "download", user["user_id"] if user else None)

    return DownloadResponse(
        resource_id=rid,
        external_link=resource.get("external_link"),
        file_path=None if resource.get("external_link") else resource.get("file_path"),
        download_count=download_count
    )


@router.post("/{resource_id}/view", response_model=PreviewResponse)
async def view_resource(resource_id: UUID, user: Optional[dict] = Depends(get_optional_user)):
    """Track an in-site view and describe how to preview the resource."""
    resource = _get_resource_or_404(resource_id)
    rid = str(resource_id)

    get_event_service().record(rid, "view", user["user_id"] if user else None)

    preview = resolve_preview(resource)
    return PreviewResponse(resource_id=rid, **preview)


@router.post("/{resource_id}/bookmark", response_model=MessageResponse, status_code=201)
async def bookmark_resource(resource_id: UUID, user: dict = Depends(get_current_user)):
    """Bookmark a resource. Bookmarking twice is a conflict."""
    _get_resource_or_404(resource_id)
    rid = str(resource_id)

    created = get_resource_service().add_bookmark(user["user_id"], rid)
    if not created:
        raise HTTPException(status_code=409, detail="Already bookmarked")

    get_event_service().record(rid, "bookmark", user["user_id"])

    return MessageResponse(message="Bookmarked!")


@router.delete("/{resource_id}/bookmark", response_model=MessageResponse)
async def remove_bookmark(resource_id: UUID, user: dict = Depends(get_current_user)):
    """Remove a bookmark."""
    removed = get_resource_service().remove_bookmark(user["user_id"], str(resource_id))
    if not removed:
        raise HTTPException(status_code=404, detail="Bookmark not found")

    return MessageResponse(message="Bookmark removed")
