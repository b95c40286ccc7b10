"""In-memory shopping cart store with a Flask cart API."""

__version__ = "1.0.0"
