from dataclasses import dataclass, field


BOOLEAN_ATTRIBUTES = ("bold", "italic")
COLOR_ATTRIBUTES = ("color", "background")
FORMAT_ATTRIBUTES = BOOLEAN_ATTRIBUTES + COLOR_ATTRIBUTES


@dataclass(frozen=True)
class Cell:
    """One (value, format) pair. Format dicts are never shared between cells."""

    value: str = ""
    format: dict = field(default_factory=dict)

    # format is a dict, so cells compare by value but are not hashable
    __hash__ = None

    def copy(self) -> "Cell":
        return Cell(self.value, dict(self.format))

    def with_value(self, value) -> "Cell":
        return Cell("" if value is None else str(value), dict(self.format))

    def with_format(self, fmt) -> "Cell":
        return Cell(self.value, dict(fmt or {}))

    @property
    def is_blank(self) -> bool:
        return self.value == "" and not self.format


def blank_cell() -> Cell:
    # always a fresh instance; never reuse one default cell across a grid
    return Cell("", {})


def merge_attribute(cell: Cell, attr: str, value=None) -> Cell:
    """Return a copy of ``cell`` with one format attribute merged in.

    Boolean attributes toggle (a missing previous value counts as False) and
    ignore ``value``. Colour attributes take ``value``; last write wins.
    """
    if attr in BOOLEAN_ATTRIBUTES:
        new_value = not bool(cell.format.get(attr, False))
    elif attr in COLOR_ATTRIBUTES:
        if not isinstance(value, str) or not value:
            raise ValueError(f"'{attr}' needs a colour token, got {value!r}")
        new_value = value
    else:
        raise ValueError(f"Unknown format attribute '{attr}'")
    fmt = dict(cell.format)
    fmt[attr] = new_value
    return Cell(cell.value, fmt)
