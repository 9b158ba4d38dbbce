"""ORM Models — SQLAlchemy declarative models for persisted emoji entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from emoji_plugin.models.custom_emoji import CustomEmoji  # noqa: F401
