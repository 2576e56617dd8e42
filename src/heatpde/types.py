from enum import Enum


class OptionType(str, Enum):
    """Option contract type.

    Attributes
    ----------
    CALL : str
        Call option ("call").
    PUT : str
        Put option ("put").
    """

    CALL = "call"
    PUT = "put"


class ExerciseStyle(str, Enum):
    """When the holder may exercise.

    ``AMERICAN`` turns the heat problem into a linear complementarity problem:
    the solution is bounded below by the (transformed) intrinsic value.
    """

    EUROPEAN = "european"
    AMERICAN = "american"
