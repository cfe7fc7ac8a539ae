# backend/orbital/database/base.py
"""
SQLAlchemy declarative base shared by all Orbital records.
"""

from sqlalchemy.orm import declarative_base

# Declarative base for all records
Base = declarative_base()
