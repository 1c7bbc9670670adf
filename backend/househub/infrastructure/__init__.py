"""Infrastructure Layer — database engine/sessions and logging setup.

Invariants:
    - Storage exceptions leave this layer as DatabaseError, never raw SQLAlchemy errors
"""
