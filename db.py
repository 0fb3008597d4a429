# db.py
# Role: Database bootstrap for the business dashboard API.
#       Builds the SQLAlchemy engine from DATABASE_URL, the session factory,
#       and the declarative Base shared by all ORM models.

"""
Database setup for the business dashboard.

- Uses DATABASE_URL when set, otherwise SQLite at <project_root>/database/bizdash.db
- Ensures the 'database' folder exists for the default SQLite file.
"""

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from config import DEFAULT_DB_PATH, DEFAULT_DATABASE_URL, get_settings


def normalize_database_url(url: str) -> str:
    # Hosted Postgres often hands out postgres://, SQLAlchemy wants a driver name
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://") and "+psycopg" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def make_engine(url: str):
    """
    Create an engine for the given URL with the connect args SQLite needs.
    """
    url = normalize_database_url(url)

    connect_args = {}
    if url.startswith("sqlite"):
        # FastAPI runs sync routes in a threadpool
        connect_args = {"check_same_thread": False}

    return create_engine(
        url,
        connect_args=connect_args,
        pool_pre_ping=True,
    )


DATABASE_URL = get_settings().database_url

if DATABASE_URL == DEFAULT_DATABASE_URL:
    os.makedirs(os.path.dirname(DEFAULT_DB_PATH), exist_ok=True)

engine = make_engine(DATABASE_URL)

# Standard session factory used via dependency injection (see app/deps.py:get_db)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Declarative base class for ORM models
Base = declarative_base()
