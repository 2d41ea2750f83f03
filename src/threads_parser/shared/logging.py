"""Correlation-aware logging for Threads parsing.

Each stage logs through a ``CorrelationLogger`` so that records emitted for
one editor instance carry the same ``correlation_id`` and name the stage that
produced them. Stages that report on a single source line bind its
``line_number`` so the record points back into the document.
"""

import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple


class CorrelationLogger(logging.LoggerAdapter):
    """Logger adapter that stamps every record with parse context.

    The context always holds ``component`` and ``correlation_id``; ``bind``
    adds more fields. Per-call ``extra`` values are merged on top of the
    context rather than replacing it.
    """

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Stage name, defaults to the last part of ``name``
            context: Extra fields attached to every record
        """
        fields: Dict[str, Any] = dict(context or {})
        fields["component"] = component or name.split(".")[-1]
        fields["correlation_id"] = correlation_id
        super().__init__(logging.getLogger(name), fields)

    @property
    def component(self) -> str:
        return self.extra["component"]

    @property
    def correlation_id(self) -> Optional[str]:
        return self.extra["correlation_id"]

    def bind(self, **fields: Any) -> "CorrelationLogger":
        """Return a logger whose records also carry ``fields``."""
        return CorrelationLogger(
            self.logger.name,
            self.correlation_id,
            self.component,
            {**self.extra, **fields},
        )

    def process(
        self,
        msg: Any,
        kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
