"""Database Configuration and Connection Management Module

This module handles database connectivity, session management, and table operations
for the interview assistant. Session snapshots and the candidate archive live in
the database named by DATABASE_URL, a local SQLite file unless configured otherwise.

Dependencies:
- sqlalchemy: For database ORM and connection management.
- dotenv: For environment variable loading.
- loguru: For logging operations.
- interview_assistant.models.session_models: For database model definitions.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv
import os
from loguru import logger
from interview_assistant.models.session_models import Base
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./interview_assistant.db")

# SQLite connections are shared between the event loop and worker threads
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Create a new SQLAlchemy engine instance
engine = create_engine(
    DATABASE_URL,
    echo=False, # Log SQL queries for debugging
    pool_pre_ping=True, # verify connections before using
    connect_args=connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def create_tables():
    """Create all database tables defined in the models.
    
    Uses SQLAlchemy's metadata to create all tables that don't already exist.
    This is typically called during application startup.
    
    Raises:
        Exception: If table creation fails
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database table: {e}")
        raise
