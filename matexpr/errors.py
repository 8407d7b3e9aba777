# --- Purpose: Error types raised while building or evaluating expressions. ---

from typing import Tuple


class DimensionMismatch(ValueError):
    """
    Raised when two operands have incompatible shapes for an operation.

    Subclasses ValueError so callers that already guard shape errors with
    ``except ValueError`` keep working.
    """

    def __init__(self, operation: str, left_shape: Tuple[int, int], right_shape: Tuple[int, int]):
        self.operation = operation
        self.left_shape = tuple(left_shape)
        self.right_shape = tuple(right_shape)
        if operation == "multiply":
            detail = "inner dimensions must match"
        else:
            detail = "shapes must match"
        super().__init__(
            f"Cannot {operation} {self.left_shape[0]}x{self.left_shape[1]} and "
            f"{self.right_shape[0]}x{self.right_shape[1]}: {detail}."
        )
