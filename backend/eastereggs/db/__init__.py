"""Database Infrastructure: the SQLAlchemy declarative Base shared by every model."""
