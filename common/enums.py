from enum import IntEnum


class OrderStatus(IntEnum):
    """
    Codes match the limit-order contract's status field
    """
    OPEN = 0
    FILLED = 1 # terminal
    CANCELLED = 2 # terminal

    @property
    def is_terminal(self):
        return self != OrderStatus.OPEN
