# Services package init
"""
TrailMix Backend: Services Layer
==================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services receive the request's AsyncSession and validated schema
       objects, run one or two statements, and return response schemas.
       Each module exposes a module-level singleton.

Service Inventory:
    - AuthService: bcrypt password hashing, JWT issue/verification
    - FileService: upload validation, storage, and cleanup
    - UserService: register, login, profile reads/updates
    - TrailService: trail CRUD, media + special points on creation
    - SpecialPointService: special point CRUD
"""
