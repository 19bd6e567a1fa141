"""Errors raised by the fermentation model."""


class InvalidDurationError(ValueError):
    """Estimated duration is not a finite, positive number of days."""

    def __init__(self, days):
        self.days = days
        super().__init__(
            f"Estimated fermentation time must be a positive number of days, got {days!r}. "
            "Check that starter and sugar amounts are above zero."
        )
