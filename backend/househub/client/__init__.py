"""Client Layer — async HTTP client and reducer-driven state store for HouseHub consumers.

Invariants:
    - Nothing here imports services/, models/ or infrastructure/: the client only
      knows the HTTP surface and the response schemas
"""
