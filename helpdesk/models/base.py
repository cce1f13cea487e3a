"""Declarative base shared by all models."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Largest value an Integer id column holds on Postgres.
MAX_ID = 2**31 - 1


class Base(DeclarativeBase):
    """Base for all models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
