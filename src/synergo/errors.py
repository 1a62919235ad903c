"""Exception types raised by the library."""


class SynergoError(Exception):
    """Base class for every error raised by synergo."""


class ValidationError(SynergoError, ValueError):
    """Input violates a precondition (empty label, malformed tag, bad field)."""


class NotFoundError(SynergoError, LookupError):
    pass


class DuplicateLabelError(SynergoError):
    def __init__(self, label: str):
        super().__init__(f"A nomenclature labelled {label!r} already exists")
        self.label = label


class NomenclatureInUseError(SynergoError):
    def __init__(self, label: str):
        super().__init__(f"Nomenclature {label!r} is still used by media")
        self.label = label


class QuizStateError(SynergoError):
    """Quiz session operation is not allowed in the current state."""
