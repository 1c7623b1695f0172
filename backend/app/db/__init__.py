"""Database layer: declarative base, store client and session dependency."""
