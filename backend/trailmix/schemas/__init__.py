"""
TrailMix Backend: API Schemas
===============================

Pydantic models for request bodies, response bodies and error payloads.
Kept separate from the ORM models so the API contract (e.g. the public
user projection) never exposes columns such as the password hash.
"""
