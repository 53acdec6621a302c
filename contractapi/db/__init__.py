"""Database Infrastructure - SQLAlchemy Base for the SQL state store."""
