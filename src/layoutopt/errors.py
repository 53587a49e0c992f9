from __future__ import annotations


class LayoutError(ValueError):
    """Base class for errors raised by the layout engine."""


class InvalidArchitectureError(LayoutError):
    def __init__(self, value: object):
        super().__init__(f"Unsupported architecture: {value!r}")
        self.value = value


class UnknownTypeError(LayoutError):
    def __init__(self, type_name: str, field_name: str | None = None):
        where = f" (field {field_name!r})" if field_name else ""
        super().__init__(f"Unknown type: {type_name!r}{where}")
        self.type_name = type_name
        self.field_name = field_name


class LayoutInvariantError(LayoutError):
    """A computed layout broke one of its own invariants."""


class StructDefinitionError(LayoutError):
    """Input struct definitions have an unexpected shape."""
