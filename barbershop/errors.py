# barbershop/errors.py


class BarbershopError(Exception):
    """Base class for errors raised by the booking core."""


class ConfigurationError(BarbershopError):
    """A required scope (selected or default barber) is missing."""


class ConflictError(BarbershopError):
    """The requested slot is not (or no longer) available."""

    def __init__(self, message: str = "Slot no longer available"):
        super().__init__(message)
        self.message = message


class EarlyBookingError(ConflictError):
    """The slot is restricted and the booking falls inside the lead time."""

    def __init__(self, label: str, lead_hours: int):
        super().__init__(f"{label} must be booked at least {lead_hours} hours in advance")
        self.label = label
        self.lead_hours = lead_hours


class DataFetchError(BarbershopError):
    """The persistence layer could not answer a read."""


class NotFoundError(BarbershopError):
    pass
