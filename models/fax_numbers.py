"""Fax number to account mapping, used to resolve the owner of received faxes."""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from models.database import Base


class FaxNumber(Base):
    __tablename__ = "numbers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    faxnum = Column(String(64), nullable=False, index=True)
    enabled = Column(Boolean, nullable=False, default=True)


class Email(Base):
    __tablename__ = "emails"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False)


class EmailNumber(Base):
    __tablename__ = "email_number"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email_id = Column(Integer, ForeignKey('emails.id'), nullable=False)
    number_id = Column(Integer, ForeignKey('numbers.id'), nullable=False, index=True)
    shared = Column(Boolean, nullable=False, default=False)
