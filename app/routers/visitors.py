# app/routers/visitors.py
"""Visitor registration, approval queue, check-out and listings."""

from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.visitor import Visitor
from app.schemas.visitor import VisitorCreate, VisitorListOut, VisitorOut, VisitorSubmitOut
from app.services import visitor_service
from app.services.exceptions import ValidationError
from app.services.query_service import visitor_history, visitors_on_premises
from app.utils.session import SessionUser, get_session_user, require_roles

router = APIRouter()


def _with_authority_name(visitor: Visitor, authority) -> VisitorListOut:
    return VisitorListOut(**VisitorOut.model_validate(visitor).model_dump(),
                          authority_name=authority.name if authority else None)


def _parse_authority_id(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Invalid authority id: {raw!r}")


@router.post("/visitors", response_model=VisitorSubmitOut, status_code=201,
             summary="Register a visitor (multipart form, optional photo)")
async def register_visitor(
    name: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    purpose: str = Form(""),
    authority_id: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    user: SessionUser = Depends(get_session_user),
    db: Session = Depends(get_db),
):
    """
    No authority → visitor is approved immediately.
    With an authority → visitor is pending and the authority (plus admin) is notified.
    """
    body = VisitorCreate(name=name, phone=phone, email=email, purpose=purpose,
                         authority_id=_parse_authority_id(authority_id), notes=notes)
    photo_bytes = await photo.read() if photo else None
    content_type = (photo.content_type if photo else None) or "image/jpeg"

    result = await visitor_service.submit_visitor(db, body, user, photo_bytes, content_type)
    return VisitorSubmitOut(
        message=result.message,
        exported=result.exported,
        notifications_created=len(result.notifications),
        visitor=VisitorOut.model_validate(result.visitor),
    )


@router.get("/visitors", response_model=list[VisitorListOut], summary="All visitors with authority name")
def list_visitors(db: Session = Depends(get_db)):
    """Newest first. Feeds the visitors CSV export."""
    return [_with_authority_name(v, a) for v, a in visitor_history(db)]


@router.get("/visitors/recent", response_model=list[VisitorListOut], summary="Recent visitors")
def recent_visitors(limit: int = Query(20, ge=1), status: Optional[str] = None, db: Session = Depends(get_db)):
    return [_with_authority_name(v, a) for v, a in visitor_history(db, status=status, limit=limit)]


@router.get("/visitors/pending", response_model=list[VisitorListOut], summary="Approval queue")
def list_pending(db: Session = Depends(get_db),
                 user: SessionUser = Depends(require_roles("admin", "authority"))):
    return [_with_authority_name(v, a) for v, a in visitor_history(db, status="pending")]


@router.get("/visitors/checked-in", response_model=list[VisitorOut], summary="Visitors currently on campus")
def list_checked_in(db: Session = Depends(get_db)):
    return visitors_on_premises(db)


@router.get("/visitors/search", response_model=list[VisitorOut], summary="Find a visitor to check out")
def search_visitors(q: str = "", db: Session = Depends(get_db)):
    """Case-insensitive match on name or phone among visitors without an exit time."""
    return visitor_service.search_for_exit(db, q)


@router.get("/visitors/{visitor_id}", response_model=VisitorOut, summary="Get one visitor")
def get_visitor(visitor_id: int, db: Session = Depends(get_db)):
    return visitor_service.get_visitor(db, visitor_id)


@router.post("/visitors/{visitor_id}/approve", response_model=VisitorOut, summary="Approve a pending visitor")
def approve_visitor(visitor_id: int, db: Session = Depends(get_db),
                    user: SessionUser = Depends(require_roles("admin", "authority"))):
    return visitor_service.decide_visitor(db, visitor_id, approve=True, actor=user)


@router.post("/visitors/{visitor_id}/reject", response_model=VisitorOut, summary="Reject a pending visitor")
def reject_visitor(visitor_id: int, db: Session = Depends(get_db),
                   user: SessionUser = Depends(require_roles("admin", "authority"))):
    return visitor_service.decide_visitor(db, visitor_id, approve=False, actor=user)


@router.post("/visitors/{visitor_id}/checkout", response_model=VisitorOut, summary="Record visitor exit")
def checkout_visitor(visitor_id: int, db: Session = Depends(get_db)):
    return visitor_service.checkout_visitor(db, visitor_id)
