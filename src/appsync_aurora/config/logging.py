"""structlog setup shared by the CLI and ``cdk synth``.

structlog and stdlib records (ours, and jsii's relay of node-side output)
go through one ``ProcessorFormatter`` on stderr, so stdout stays free for
command results and the CDK toolkit.  Every record carries the stack id.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Loggers that stay at WARNING even under --verbose.
_QUIET_LOGGERS = ("jsii",)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(log_json: bool) -> logging.Handler:
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stack_id: str | None = None,
) -> None:
    """Route all logging to stderr and bind the deployment context.

    Args:
        verbose: Let ``appsync_aurora`` loggers emit DEBUG; otherwise WARNING.
        log_json: Render JSON lines instead of the console format.
        stack_id: Stack being built or inspected; bound as ``stack`` on
            every record.  Any previously bound context is cleared.
    """
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger("appsync_aurora").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    if stack_id is not None:
        structlog.contextvars.bind_contextvars(stack=stack_id)
