"""
Company Routes

GET /companies - List companies (optional name search)
POST /companies - Add a company (mentor/admin)
GET /companies/{company_id} - Company details with its resources
DELETE /companies/{company_id} - Delete a company and its resources (mentor/admin)
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text
from typing import List, Optional
from uuid import UUID

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_optional_user, get_content_manager
from app.services.resource_service import get_resource_service
from app.schemas.schemas import (
    CompanyCreate, CompanyResponse, CompanyDetailResponse, ResourceResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])

COMPANY_COLUMNS = "id::text AS id, name, description, logo_url, is_featured, created_at"


def _company_from_row(r: dict) -> CompanyResponse:
    return CompanyResponse(
        id=r["id"], name=r["name"], description=r["description"],
        logo_url=r["logo_url"], is_featured=bool(r["is_featured"]), created_at=r["created_at"]
    )


@router.get("", response_model=List[CompanyResponse])
async def list_companies(
    search: Optional[str] = Query(None, description="Case-insensitive match on company name")
):
    """List all companies ordered by name."""
    sql = f"SELECT {COMPANY_COLUMNS} FROM companies"
    params = {}

    if search and search.strip():
        sql += " WHERE name ILIKE :search"
        params["search"] = f"%{search.strip()}%"

    sql += " ORDER BY name"
    results = execute_raw_sql(sql, params)

    return [_company_from_row(r) for r in results]


@router.post("", response_model=CompanyResponse, status_code=201)
async def create_company(company: CompanyCreate, user: dict = Depends(get_content_manager)):
    """Add a company. Mentors and admins only."""
    name = company.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Company name is required")

    results = execute_raw_sql(f"""
        INSERT INTO companies (name, description, logo_url, is_featured)
        VALUES (:name, :description, :logo_url, :is_featured)
        RETURNING {COMPANY_COLUMNS}
    """, {
        "name": name, "description": company.description,
        "logo_url": company.logo_url, "is_featured": company.is_featured
    })

    logger.info("Company '%s' added by %s", name, user["user_id"])
    return _company_from_row(results[0])


@router.get("/{company_id}", response_model=CompanyDetailResponse)
async def get_company(company_id: UUID, user: Optional[dict] = Depends(get_optional_user)):
    """Get a company and its resources. Signed-in users also get their bookmarked ids."""
    results = execute_raw_sql(
        f"SELECT {COMPANY_COLUMNS} FROM companies WHERE id = :id",
        {"id": str(company_id)}
    )
    if not results:
        raise HTTPException(status_code=404, detail="Company not found")

    service = get_resource_service()
    resources = service.get_company_resources(str(company_id))
    bookmarked = service.get_bookmarked_ids(user["user_id"]) if user else []

    return CompanyDetailResponse(
        company=_company_from_row(results[0]),
        resources=[ResourceResponse.from_row(r) for r in resources],
        bookmarked_resource_ids=bookmarked
    )


@router.delete("/{company_id}", response_model=MessageResponse)
async def delete_company(company_id: UUID, user: dict = Depends(get_content_manager)):
    """Delete a company. Its resources are removed with it (ON DELETE CASCADE)."""
    with get_db_session() as db:
        result = db.execute(text("DELETE FROM companies WHERE id = :id"), {"id": str(company_id)})
        deleted = result.rowcount > 0

    if not deleted:
        raise HTTPException(status_code=404, detail="Company not found")

    logger.info("Company %s deleted by %s", company_id, user["user_id"])
    return MessageResponse(message="Company deleted")
