"""Schemas - Pydantic models at the API boundary and for contract metadata."""
