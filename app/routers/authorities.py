# app/routers/authorities.py
"""Authority administration: the people who approve visitors."""

from typing import Literal
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.authority import AuthorityCreate, AuthorityOut, AuthorityUpdate
from app.services import authority_service
from app.utils.session import SessionUser, require_roles

router = APIRouter()

_ACTIVE_FILTER = {"active": True, "inactive": False, "all": None}


@router.get("/authorities", response_model=list[AuthorityOut], summary="List authorities")
def list_authorities(filter: Literal["active", "inactive", "all"] = "active", db: Session = Depends(get_db)):
    """Ordered by designation, then name. Active ones populate the visitor form."""
    return authority_service.list_authorities(db, _ACTIVE_FILTER[filter])


@router.post("/authorities", response_model=AuthorityOut, status_code=201, summary="Add an authority")
def add_authority(body: AuthorityCreate, db: Session = Depends(get_db),
                  user: SessionUser = Depends(require_roles("admin"))):
    return authority_service.create_authority(db, body)


@router.put("/authorities/{authority_id}", response_model=AuthorityOut, summary="Edit an authority")
def edit_authority(authority_id: int, body: AuthorityUpdate, db: Session = Depends(get_db),
                   user: SessionUser = Depends(require_roles("admin"))):
    return authority_service.update_authority(db, authority_id, body)


@router.post("/authorities/{authority_id}/toggle", response_model=AuthorityOut, summary="Activate / deactivate")
def toggle_authority(authority_id: int, db: Session = Depends(get_db),
                     user: SessionUser = Depends(require_roles("admin"))):
    return authority_service.toggle_authority(db, authority_id)


@router.delete("/authorities/{authority_id}", summary="Remove an authority")
def remove_authority(authority_id: int, db: Session = Depends(get_db),
                     user: SessionUser = Depends(require_roles("admin"))):
    authority_service.delete_authority(db, authority_id)
    return {"status": "removed", "id": authority_id}
