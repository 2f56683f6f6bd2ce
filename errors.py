class GridError(Exception):
    """Base class for errors raised by the grid engine."""


class OutOfBounds(GridError, IndexError):
    def __init__(self, kind: str, index, limit: int):
        self.kind = kind
        self.index = index
        self.limit = limit
        super().__init__(f"{kind} index {index} out of range (0..{limit - 1})")


class ShapeViolation(GridError, ValueError):
    """Grid rows/columns/names disagree, or a dimension would be empty."""


class MalformedInput(GridError, ValueError):
    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
