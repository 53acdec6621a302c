"""ORM Models - tables backing the SQL state store."""
