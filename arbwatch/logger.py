"""
Structured logging configuration for the arbwatch opportunity engine.
Uses structlog for rich, structured logging output.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler

from arbwatch.config import get_config


# Rich console for pretty output
console = Console()


def add_timestamp(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Add ISO timestamp to log events."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_component(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Ensure component is present in log events."""
    if "component" not in event_dict:
        event_dict["component"] = "main"
    return event_dict


def setup_logging() -> None:
    """Configure structured logging for the application."""
    config = get_config()
    log_level = getattr(logging, config.monitoring.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_time=True,
                show_path=False,
            )
        ],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        add_timestamp,
        add_component,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if config.development.debug_mode:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to a specific component."""
    return structlog.get_logger().bind(component=component)


class OpportunityLogger:
    """Specialized logger for detection and execution activity."""

    def __init__(self):
        self.logger = get_logger("opportunities")

    def log_opportunity_detected(
        self,
        kind: str,
        opportunity_id: str,
        score: Optional[float],
        summary: Optional[str] = None,
    ) -> None:
        """Log detection of a new opportunity."""
        self.logger.info(
            "opportunity_detected",
            kind=kind,
            opportunity_id=opportunity_id,
            score=f"{score:.4f}" if score is not None else None,
            summary=summary,
        )

    def log_execution(
        self,
        kind: str,
        subject_id: str,
        reason: str,
        outcome: str,
    ) -> None:
        """Log a simulated execution."""
        self.logger.info(
            "⚡ execution_simulated",
            kind=kind,
            subject_id=subject_id,
            reason=reason,
            outcome=outcome,
        )

    def log_poll_completed(
        self,
        kind: str,
        sources: int,
        failed_sources: int,
        new_opportunities: int,
        total_opportunities: int,
        duration_ms: float,
    ) -> None:
        """Log the summary of one poll cycle."""
        self.logger.debug(
            "poll_completed",
            kind=kind,
            sources=sources,
            failed_sources=failed_sources,
            new=new_opportunities,
            total=total_opportunities,
            duration_ms=f"{duration_ms:.1f}",
        )


# Global logger instance
opportunity_logger = OpportunityLogger()
