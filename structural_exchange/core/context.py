"""
Operation Context - Per-call State for Import, Merge and Export

Every operation (one import, one duplicate-merge pass, one export) works on a
fresh ``OperationContext`` that owns the mutable state the operation needs:

- a CoordinateRegistry (canonical point ids)
- an IdGenerator (entity ids)
- an OperationReport collecting recoverable anomalies
- a cancellation flag checked between phases and element batches

A context may be claimed by one operation only. Passing the same context to a
second operation raises ContextReuseError, so ids issued for one document can
never leak into another.

Usage:
    from structural_exchange.core.context import OperationContext

    context = OperationContext()
    model = import_from_sections(sections, context=context)
    for warning in context.report.warnings:
        print(warning)

    # From another thread
    context.cancel()
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import (
    ContextReuseError,
    ExchangeWarning,
    MalformedRecordError,
    OperationCancelled,
    SkippedElementWarning,
)
from .ids import IdGenerator
from .point_registry import CoordinateRegistry

logger = logging.getLogger(__name__)


@dataclass
class OperationReport:
    """Recoverable anomalies observed during one operation.

    Attributes:
        warnings: Recorded warnings (missing sections, unresolved references,
            skipped elements)
        record_errors: Records that failed to parse and were skipped
    """

    warnings: List[ExchangeWarning] = field(default_factory=list)
    record_errors: List[MalformedRecordError] = field(default_factory=list)

    def warn(self, warning: ExchangeWarning) -> None:
        self.warnings.append(warning)
        logger.warning(str(warning))

    def record_error(self, error: MalformedRecordError) -> None:
        self.record_errors.append(error)
        logger.warning(str(error))

    def warnings_of(self, kind: type) -> List[ExchangeWarning]:
        return [w for w in self.warnings if isinstance(w, kind)]

    @property
    def skipped_elements(self) -> List[SkippedElementWarning]:
        return self.warnings_of(SkippedElementWarning)

    @property
    def is_clean(self) -> bool:
        return not self.warnings and not self.record_errors

    def to_dict(self) -> Dict[str, Any]:
        """Summary suitable for logging or JSON responses."""
        return {
            "warnings": [
                {"type": type(w).__name__, "message": str(w)} for w in self.warnings
            ],
            "record_errors": [
                {
                    "section": e.section,
                    "line": e.line_number,
                    "reason": e.reason,
                }
                for e in self.record_errors
            ],
        }


class OperationContext:
    """Mutable state scoped to exactly one operation."""

    def __init__(
        self,
        registry: Optional[CoordinateRegistry] = None,
        ids: Optional[IdGenerator] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        """
        Args:
            registry: Coordinate registry (fresh one when omitted)
            ids: Entity id generator (fresh one when omitted)
            cancel_event: Event shared with the orchestrator; set it to cancel
        """
        self.registry = registry if registry is not None else CoordinateRegistry()
        self.ids = ids if ids is not None else IdGenerator()
        self.report = OperationReport()
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self.operation: Optional[str] = None

    def claim(self, operation: str) -> "OperationContext":
        """Bind this context to ``operation``.

        Raises:
            ContextReuseError: If another operation already claimed the context
        """
        if self.operation is not None:
            raise ContextReuseError(self.operation, operation)
        self.operation = operation
        logger.debug(f"Context claimed by {operation}")
        return self

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def check_cancelled(self, stage: str) -> None:
        """Raise OperationCancelled if cancellation was requested.

        Called between phases and element batches.
        """
        if self._cancel_event.is_set():
            logger.info(f"{self.operation or 'operation'} cancelled at {stage}")
            raise OperationCancelled(self.operation or "operation", stage)


def fresh_context(context: Optional[OperationContext], operation: str) -> OperationContext:
    """Claim ``context`` for ``operation``, creating a new one when None."""
    return (context if context is not None else OperationContext()).claim(operation)
