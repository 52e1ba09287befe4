"""FastAPI application and packaged UI."""
