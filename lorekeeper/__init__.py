"""lorekeeper - caching search over the D&D 5e reference-data API."""

__version__ = "0.1.0"
