from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from photoshare.db import Base


class User(Base):
    __tablename__ = "users"

    # Supplied by the client at registration, not autoincremented
    id = Column(Integer, primary_key=True, index=True, autoincrement=False)
    username = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow,
                        onupdate=datetime.utcnow, nullable=False)

    photos = relationship("Photo", back_populates="user",
                          cascade="all, delete-orphan")
