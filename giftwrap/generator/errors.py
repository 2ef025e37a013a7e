"""Errors raised while deriving conversions for a declaration."""

CONFLICT_HINT = "\n\tConsider using #[noWrap] or #[wrapDepth] here"


class DeriveError(RuntimeError):
    """Base exception for derivation failures.

    `location` is a declaration path such as `Shape::Circle` or
    `Wrapper.fields`.
    """

    def __init__(self, location: str, message: str):
        super().__init__(f"{location}: {message}")
        self.location = location
        self.message = message


class NotSingleField(DeriveError):
    """Raised when a struct or eligible alternative has more than one field."""

    def __init__(self, location: str, derive: str, what: str):
        super().__init__(location, f"{derive} can only be derived for {what} with 1 field")


class UnitVariantUnsupported(DeriveError):
    """Raised when a struct or eligible alternative has no fields."""

    def __init__(self, location: str, derive: str, what: str):
        super().__init__(location, f"{derive} cannot be derived for Unit {what}")


class GenericConflict(DeriveError):
    """Raised when wrapping a type parameter would overlap other conversions."""

    def __init__(self, location: str):
        super().__init__(
            location,
            "Generic type cannot be wrapped without causing conflicting implementations"
            + CONFLICT_HINT,
        )


class DuplicateInnerType(DeriveError):
    """Raised when two conversion sources resolve to the same type."""

    def __init__(self, location: str):
        super().__init__(
            location, "Cannot derive Wrap for two variants with the same inner type" + CONFLICT_HINT
        )


class MalformedAnnotation(DeriveError):
    """Raised when an annotation cannot be resolved into options."""


class UnsupportedShape(DeriveError):
    """Raised for declarations that are neither structs nor enums."""

    def __init__(self, location: str, derive: str, shape: str):
        super().__init__(location, f"{derive} cannot be derived for {shape}")


class DeclarationError(DeriveError):
    """Raised when a declaration document is structurally invalid."""
