"""Single source of truth for the closuredeps version (Semantic Versioning)."""

__version__ = "0.1.0"
