import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from photoshare.db import commit_or_raise, get_db
from photoshare.models.photo import Photo
from photoshare.routes.users import MessageResponse
from photoshare.utils.errors import NotFoundError, BadRequestError
from photoshare.utils.security import require_token


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/photos", tags=["photos"])


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PhotoCreate(CamelModel):
    title: str = ""
    caption: str = ""
    photo_url: str = ""
    user_id: int = 0


class PhotoUpdate(CamelModel):
    title: Optional[str] = None
    caption: Optional[str] = None
    photo_url: Optional[str] = None
    user_id: Optional[int] = None


class PhotoOut(CamelModel):
    id: int
    title: str
    caption: str
    photo_url: str
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


EDITABLE_TEXT_FIELDS = ("title", "caption", "photo_url")


def _get_photo_or_404(db: Session, photo_id: int) -> Photo:
    photo = db.query(Photo).filter(Photo.id == photo_id).first()
    if not photo:
        raise NotFoundError("photo not found")
    return photo


@router.post("", response_model=MessageResponse)
def create_photo(
    payload: PhotoCreate,
    db: Session = Depends(get_db),
    caller: str = Depends(require_token),
):
    if not payload.title or not payload.caption or not payload.photo_url or not payload.user_id:
        raise BadRequestError("title, caption, photoUrl and userId are required")

    photo = Photo(title=payload.title,
                  caption=payload.caption,
                  photo_url=payload.photo_url,
                  user_id=payload.user_id)
    db.add(photo)
    commit_or_raise(db, "failed to save photo")
    logger.info("Photo %s added for user %s by %s", photo.id, photo.user_id, caller)
    return {"message": "photo added"}


@router.get("", response_model=List[PhotoOut])
def list_photos(db: Session = Depends(get_db)):
    return db.query(Photo).order_by(Photo.id).all()


@router.put("/{photo_id}", response_model=MessageResponse)
def update_photo(
    photo_id: int,
    payload: PhotoUpdate,
    db: Session = Depends(get_db),
    caller: str = Depends(require_token),
):
    photo = _get_photo_or_404(db, photo_id)

    changes = payload.model_dump(exclude_unset=True)
    for field in EDITABLE_TEXT_FIELDS:
        if field in changes and not changes[field]:
            raise BadRequestError("title, caption and photoUrl cannot be empty")
    # A zero or null owner means "leave unchanged"
    if not changes.get("user_id"):
        changes.pop("user_id", None)
    if not changes:
        raise BadRequestError("no fields to update")

    for field, value in changes.items():
        setattr(photo, field, value)
    commit_or_raise(db, "failed to update photo")
    logger.info("Photo %s updated by %s (%s)", photo_id, caller, ", ".join(sorted(changes)))
    return {"message": "photo updated"}


@router.delete("/{photo_id}", response_model=MessageResponse)
def delete_photo(
    photo_id: int,
    db: Session = Depends(get_db),
    caller: str = Depends(require_token),
):
    photo = _get_photo_or_404(db, photo_id)
    db.delete(photo)
    commit_or_raise(db, "failed to delete photo")
    logger.info("Photo %s deleted by %s", photo_id, caller)
    return {"message": "photo deleted"}
