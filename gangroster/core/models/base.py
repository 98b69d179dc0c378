from gangroster.models import Base, Owned


class AppBase(Base, Owned):
    """An AppBase object is a base class for all roster models.

    This base class provides:
    - UUID primary key and timestamps (from Base)
    - Owner tracking (from Owned)
    """

    class Meta:
        abstract = True
