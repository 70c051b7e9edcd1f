"""Error and warning taxonomy of the exchange core.

Two families:

* Warnings (``ExchangeWarning``) describe recoverable anomalies. They are never
  raised; they are recorded on the operation report and logged, and the
  operation continues with a documented default.
* Errors (``ExchangeError``) are raised. ``MalformedRecordError`` is caught by
  the section reader that produced it (the record is skipped and the error is
  recorded); ``FatalImportError`` and its subclasses abort the whole operation
  and identify the phase and section that failed.
"""

from typing import Optional


# =============================================================================
# Recorded warnings
# =============================================================================


class ExchangeWarning(UserWarning):
    """Base class for recoverable anomalies recorded on an operation report."""


class MissingSectionWarning(ExchangeWarning):
    """An optional input section is absent; the phase proceeds with defaults."""

    def __init__(self, section: str, phase: Optional[str] = None):
        self.section = section
        self.phase = phase
        super().__init__(f"Optional section '{section}' not supplied; using defaults")


class UnresolvedReferenceWarning(ExchangeWarning):
    """A foreign-key id was not found; the resolver substituted a default."""

    def __init__(self, field: str, ref_id: str, default: object = None, owner_id: Optional[str] = None):
        self.field = field
        self.ref_id = ref_id
        self.default = default
        self.owner_id = owner_id
        owner = f" on {owner_id}" if owner_id else ""
        super().__init__(
            f"Unresolved {field} reference '{ref_id}'{owner}; using default {default!r}"
        )


class SkippedElementWarning(ExchangeWarning):
    """An element lacks required geometry and was left out of a geometric pass."""

    def __init__(self, collection: str, element_id: str, operation: str):
        self.collection = collection
        self.element_id = element_id
        self.operation = operation
        super().__init__(
            f"{collection} element {element_id} has no usable geometry; skipped by {operation}"
        )


# =============================================================================
# Raised errors
# =============================================================================


class ExchangeError(Exception):
    """Base class for errors raised by the exchange core."""


class MalformedRecordError(ExchangeError):
    """A single record could not be parsed; the record is skipped."""

    def __init__(self, section: str, record: str, reason: str, line_number: Optional[int] = None):
        self.section = section
        self.record = record
        self.reason = reason
        self.line_number = line_number
        where = f"{section}:{line_number}" if line_number is not None else section
        super().__init__(f"Malformed record in {where}: {reason} ({record.strip()!r})")


class FatalImportError(ExchangeError):
    """The import cannot reach the Ready state.

    Attributes:
        phase: Name of the import phase that failed
        section: Section being processed when the failure occurred, if any
    """

    def __init__(self, phase: str, message: str, section: Optional[str] = None):
        self.phase = phase
        self.section = section
        self.message = message
        location = f"phase {phase}" + (f", section '{section}'" if section else "")
        super().__init__(f"Import failed in {location}: {message}")


class MissingRequiredSection(FatalImportError):
    """A structurally required section is absent."""

    def __init__(self, phase: str, section: str, reason: str):
        self.reason = reason
        super().__init__(phase, f"required section missing: {reason}", section=section)


class PhaseTransitionError(ExchangeError):
    """An import tried to move to a phase other than the next one."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move from phase {current} to {requested}")


class ContextReuseError(ExchangeError):
    """An operation context was handed to a second operation."""

    def __init__(self, claimed_by: str, requested_by: str):
        self.claimed_by = claimed_by
        self.requested_by = requested_by
        super().__init__(
            f"Operation context already used by '{claimed_by}'; "
            f"create a fresh context for '{requested_by}'"
        )


class OperationCancelled(ExchangeError):
    """The caller cancelled the operation between phases or batches."""

    def __init__(self, operation: str, stage: str):
        self.operation = operation
        self.stage = stage
        super().__init__(f"{operation} cancelled at {stage}")
