from enum import StrEnum


class RotationDirection(StrEnum):
    CLOCKWISE = "clockwise"
    COUNTERCLOCKWISE = "counterclockwise"

    def to_int(self) -> int:
        """Returns +1 for clockwise (increasing clock time), -1 otherwise."""
        if self == RotationDirection.CLOCKWISE:
            return 1
        return -1

    @classmethod
    def from_int(cls, value: int) -> 'RotationDirection':
        if value == 1:
            return cls.CLOCKWISE
        if value == -1:
            return cls.COUNTERCLOCKWISE
        raise ValueError(f"Direction must be +1 or -1, got {value!r}.")

    def __int__(self) -> int:
        return self.to_int()

    def __bool__(self) -> bool:
        raise TypeError("Use .to_int() for explicit conversion.")


def as_step_direction(direction: 'RotationDirection | int | str') -> int:
    """
    Normalizes a direction given as `RotationDirection`, its string value or
    an integer +1/-1 to the integer step direction.
    """
    if isinstance(direction, str):
        return RotationDirection(direction).to_int()
    if direction in (1, -1):
        return int(direction)
    raise ValueError(f"Direction must be +1 or -1, got {direction!r}.")
