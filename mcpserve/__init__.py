"""Model Context Protocol building blocks: protocol types, URI templates, pagination and hooks."""

__version__ = "0.1.0"

__all__ = ["hooks", "pagination", "protocol", "uritemplate"]