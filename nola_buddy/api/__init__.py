"""FastAPI-facing helpers that live inside the core package."""
