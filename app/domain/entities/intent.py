from enum import Enum


class Intent(str, Enum):
    BOOKING = "booking"
    CANCEL = "cancel"
    INFORMATION = "information"
