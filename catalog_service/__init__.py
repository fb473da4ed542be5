"""Product catalog service: FastAPI + SQLAlchemy."""
