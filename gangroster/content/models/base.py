"""
Base class for content (catalog) models.

Content rows describe the game's rules data: fighter types, equipment,
skills and effect templates. Roster models in gangroster.core reference them.
"""

from gangroster.models import Base


class Content(Base):
    """
    An abstract base model that captures common fields for all content-related
    models. Subclasses should inherit from this to store standard metadata.
    """

    class Meta:
        abstract = True
