"""
Error taxonomy for the tracker.

Every error raised by the tracker core derives from TrackerError so the CLI
can report it uniformly. Errors surface to the caller of the operation that
detected them; nothing here is retried.
"""


class TrackerError(Exception):
    """Base class for tracker errors."""
    pass


class NotFound(TrackerError):
    """Unknown component or milestone name."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} '{name}' not found")


class AlreadyExists(TrackerError):
    """Duplicate milestone creation."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} '{name}' already exists")


class IndexOutOfRange(TrackerError):
    """Issue index does not refer to an issue that can be acted on."""

    def __init__(self, component: str, index: int, size: int):
        self.component = component
        self.index = index
        self.size = size
        super().__init__(
            f"Issue index {index} out of range for '{component}' ({size} issue(s))"
        )


class InvalidInput(TrackerError):
    """A value outside the configured closed sets (status, phase, name)."""

    def __init__(self, field: str, value, allowed=None):
        self.field = field
        self.value = value
        self.allowed = list(allowed) if allowed else []
        message = f"Invalid {field}: {value!r}"
        if self.allowed:
            message += f" (expected one of: {', '.join(self.allowed)})"
        super().__init__(message)


class CyclicDependency(TrackerError):
    """The dependency table contains a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = list(cycle)
        super().__init__(f"Cyclic dependency: {' -> '.join(self.cycle)}")


class ConfigError(TrackerError):
    """tracker.yaml could not be loaded or is inconsistent."""

    def __init__(self, message: str, path=None):
        self.path = path
        super().__init__(message + (f" ({path})" if path else ""))
