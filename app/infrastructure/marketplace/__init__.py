"""
Infrastructure adapters for the marketplace bounded context.

Each adapter implements a domain port (ABC) on top of a
SQLAlchemy session.
"""
