# Middleware package init
"""
TrailMix Backend: Middleware Package
======================================

What:  Cross-cutting concerns applied to every request, plus the bearer
       token dependency used by protected routes.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so every later log line can carry it
    - Logging measures duration and status on the way back out
    - auth.require_user is a per-route dependency, not global middleware
"""
