"""Declarative base shared by the ORM models"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# ORM model classes live in app/infrastructure/orm/; importing them here would
# create circular imports.
