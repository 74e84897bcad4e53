"""Logging utilities."""

from tripflow.shared.logging.config import (
    StructuredFormatter,
    log_state_transition,
    setup_logging,
)

__all__ = ["StructuredFormatter", "log_state_transition", "setup_logging"]
