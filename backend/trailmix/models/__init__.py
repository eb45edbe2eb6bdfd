"""
TrailMix Backend: ORM Models
==============================

Importing this package registers every table on `Base.metadata`
(used by Alembic autogenerate and by the test suite's `create_all`).
"""

from trailmix.models.user import User
from trailmix.models.trail import Trail
from trailmix.models.special_point import SpecialPoint

__all__ = ["User", "Trail", "SpecialPoint"]
