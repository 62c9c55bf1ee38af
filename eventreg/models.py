from sqlalchemy import Column, String, Boolean, JSON, DateTime, func
from eventreg.database import Base


class Document(Base):
    __tablename__ = "documents"

    path = Column(String, primary_key=True)        # "<collection>/<key>", e.g. users/<uid>
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Account(Base):
    __tablename__ = "accounts"

    uid = Column(String, primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)  # <salt hex>$<pbkdf2 hex>
    email_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String, index=True)
    created_at = Column(DateTime, server_default=func.now())
