"""
FastAPI RESTful API for the Book Index service.

This module provides a REST API for:
- Creating, reading, updating and deleting Book documents
- Index engine health checks
"""
