"""
Integration tests against a SQLite file through the async SQLAlchemy stack.

    pytest -m integration
"""
