# barbershop/data.py

from datetime import time

# day_of_week (0=Sunday): (morning [start, end), afternoon [start, end) or None)
DEFAULT_BUSINESS_HOURS = {
    0: ((time(10), time(15)), None),
    1: ((time(7), time(12)), (time(15), time(21))),
    2: ((time(7), time(12)), (time(15), time(21))),
    3: ((time(7), time(12)), (time(15), time(19))),
    4: ((time(7), time(12)), (time(15), time(21))),
    5: ((time(7), time(12)), (time(15), time(21))),
    6: ((time(7), time(12)), (time(15), time(21))),
}

# name: (price, duration in minutes)
DEFAULT_SERVICES = {
    "Haircut": (500, 60),
    "Beard trim": (300, 30),
    "Haircut and beard": (700, 60),
    "Fade": (600, 60),
}

DEFAULT_SETTINGS = {
    "multiple_barbers_enabled": False,
    "early_booking_restriction": False,
    "early_booking_hours": 12,
    "restricted_hours": [],
    "reviews_enabled": True,
}
