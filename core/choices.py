from django.db import models


class CoercingChoices(models.TextChoices):
    """TextChoices with a fallback member for unknown stored tags.

    Values read from the database or from API payloads go through
    :meth:`coerce`, so an unrecognised tag never leaks past the model layer.
    """

    @classmethod
    def fallback(cls):
        return cls.OTHER

    @classmethod
    def coerce(cls, value):
        """Return the member for ``value`` or the fallback member."""
        if isinstance(value, str):
            value = value.strip().lower()
        if value in cls.values:
            return cls(value)
        return cls.fallback()
