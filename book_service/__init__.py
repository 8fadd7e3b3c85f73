"""
Book Service - CRUD microservice for books backed by MongoDB.
"""

__version__ = "1.0.0"
