# Routes package init
"""
TrailMix Backend: API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one resource.

Route Inventory:
    - users.py:           /api/users/register, /login, /profile, /profile/image
    - trails.py:          /api/trails, /api/trails/user, /api/trails/{id}
    - special_points.py:  /api/special-points, /trail/{trail_id}, /{id}
    - health.py:          GET /, GET /api/test, GET /health

Routes stay thin: extract input, call a service, shape the response.
Business logic lives in trailmix.services.
"""
