"""Services Layer — imperative shell around the pure core.

Invariants:
    - Services take an AsyncSession and own the transaction boundaries of their writes
    - Services raise HouseHubError subclasses only; HTTP mapping is the API's job
    - Request → entity conversion goes through services.mapping (explicit fields)
"""
