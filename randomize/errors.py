"""
Error messages and exception types shared by the randomization library.
"""


MIN_ABOVE_MAX = "The minimum bound cannot be greater than the maximum bound."
NULL_BUFFER = "Buffer cannot be null."
TOTAL_WEIGHT_IS_ZERO = "Total weight cannot be zero."
UNRECOGNIZED_FORMAT = "The provided format is unrecognized"
INVALID_PARAMETERS = "The input string was not in a correct format for distribution parameters"


class ParameterFormatError(ValueError):
    """Raised when a distribution parameter string cannot be parsed."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"{INVALID_PARAMETERS}: {text!r}")
