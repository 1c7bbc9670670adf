"""HouseHub — household todos, members, assignments and calendar events.

Invariants:
    - Package root holds metadata only (no import side-effects)
"""

__version__ = "1.0.0"
