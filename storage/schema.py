# storage/schema.py
from __future__ import annotations
from datetime import datetime
from typing import List

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, String, Text, inspect,
)
from sqlalchemy.engine import Connection
from sqlalchemy.orm import declarative_base

from logger import log

Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_editor = Column(Boolean, default=False, nullable=False)
    is_activated = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class SiteConfiguration(Base):
    """Key/value settings the running wiki keeps in its data store."""
    __tablename__ = "site_configuration"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)


class Page(Base):
    __tablename__ = "pages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    tags = Column(String(255), default="")
    created_by = Column(String(255), nullable=False)
    created_on = Column(DateTime, default=datetime.utcnow)
    is_locked = Column(Boolean, default=False)


class PageContent(Base):
    __tablename__ = "page_content"

    id = Column(Integer, primary_key=True, autoincrement=True)
    page_id = Column(Integer, ForeignKey("pages.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    edited_by = Column(String(255), nullable=False)
    edited_on = Column(DateTime, default=datetime.utcnow)
    version_number = Column(Integer, nullable=False, default=1)


def missing_tables(bind) -> List[str]:
    existing = set(inspect(bind).get_table_names())
    return [name for name in Base.metadata.tables if name not in existing]


def init_schema(bind) -> List[str]:
    """
    Create whatever core tables are missing and return their names.

    Existing tables and their rows are left alone, so running this against
    an initialised store is a no-op.
    """
    created = missing_tables(bind)
    Base.metadata.create_all(bind, checkfirst=True)
    if isinstance(bind, Connection):
        bind.commit()
    if created:
        log.info("Created tables: %s", ", ".join(created))
    else:
        log.info("Schema already initialised, nothing to create")
    return created
