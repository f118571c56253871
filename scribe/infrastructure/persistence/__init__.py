"""SQLAlchemy-backed repositories."""
