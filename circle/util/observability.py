"""Observability configuration using Logfire.

Usage:
    import logfire

    # Structured logging
    logfire.info("Friend request sent", sender_id=..., recipient_id=...)

    # Manual spans around every engine operation
    with logfire.span("friendship_service.accept_request", recipient_id=...):
        ...
"""

import logfire

from circle.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    - Development: local-only (unless a token is provided), rich console output
    - Production: cloud sending when a token is provided, minimal console
    - Test: console disabled, nothing sent

    Args:
        settings: Application settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    elif settings.observability.logfire_token:
        send_to_logfire = True
    else:
        send_to_logfire = False

    config_kwargs = {
        "service_name": "circle-graph",
        "service_version": "0.1.0",
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": False
        if settings.environment == "test"
        else logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_redis() -> None:
    """Instrument the redis client used by the FalkorDB driver.

    Traces every graph command sent over the connection pool, including
    its latency.
    """
    logfire.instrument_redis()
    logfire.info("redis instrumented")
