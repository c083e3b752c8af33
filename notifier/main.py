"""Main entry point for the Submission Notifier service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from notifier.config.environment import EnvironmentConfig
from notifier.config.exceptions import ConfigurationError
from notifier.config.holder import ConfigHolder, file_loader
from notifier.config.loader import apply_environment_overrides, load_config, validate_config_file
from notifier.config.models import AppConfig
from notifier.dispatch.resolvers import default_resolver
from notifier.dispatch.smtp_client import SMTPClient
from notifier.listener import ListenerBridge, SubmissionEventListener
from notifier.logging import get_logger
from notifier.logging.config import configure_logging
from notifier.notifications.service import NotificationService
from notifier.resources.store import HttpResourceStore
from notifier.scheduler import ReloadScheduler

logger = get_logger(__name__, component="cli")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Submission Notifier - email notifications for submission events"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--event-id",
        action="append",
        dest="event_ids",
        default=[],
        metavar="EVENT_ID",
        help="Notify for this submission event and exit (repeatable)",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate the configuration file and exit",
    )
    return parser


def load_runtime_config(
    config_path: Path, log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with the effective log level set

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_notification_service(
    holder: ConfigHolder, env_config: EnvironmentConfig
) -> NotificationService:
    """Wire the resource store, mail transport and template resolver."""
    app_config = holder.get()
    resource_store = HttpResourceStore(
        timeout=app_config.resources.http_request_timeout,
        user_agent=app_config.resources.user_agent,
        username=env_config.resource_store_user,
        password=env_config.resource_store_pass,
    )
    transport = SMTPClient.from_environment(env_config, app_config.email)
    return NotificationService(
        config_holder=holder,
        resource_store=resource_store,
        transport=transport,
        resolver=default_resolver(timeout=app_config.resources.http_request_timeout),
    )


def run_manual(service: NotificationService, event_ids: Sequence[str]) -> int:
    """Notify for each event id in turn; exit code 1 if any failed."""
    failures: List[str] = []
    for event_id in event_ids:
        try:
            result = service.notify(event_id)
        except Exception as e:
            logger.error(
                f"Notification for event {event_id} failed: {e}",
                exc_info=True,
                extra={
                    "event": "service.manual_notify.failed",
                    "event_id": event_id,
                    "error_type": type(e).__name__,
                },
            )
            failures.append(event_id)
            continue
        logger.info(
            f"Event {event_id}: {result.status}",
            extra={
                "event": "service.manual_notify.completed",
                "event_id": event_id,
                "status": result.status,
                "delivery_id": result.delivery_id,
            },
        )
    return 1 if failures else 0


def run_daemon(holder: ConfigHolder, service: NotificationService) -> int:
    """Run the listener bridge on stdin/stdout until EOF or a signal."""
    app_config = holder.get()
    shutdown_event = threading.Event()

    listener = SubmissionEventListener(holder, service)
    bridge = ListenerBridge(
        listener,
        input_stream=sys.stdin,
        output_stream=sys.stdout,
        concurrency=app_config.listener.concurrency,
        shutdown_event=shutdown_event,
    )

    reload_scheduler = None
    if app_config.reload_interval_seconds:
        reload_scheduler = ReloadScheduler(
            reload_callable=holder.reload,
            interval_seconds=app_config.reload_interval_seconds,
        )
        reload_scheduler.start()

    def signal_handler(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info(
        "Listening for submission events on stdin",
        extra={"event": "service.daemon_mode.started"},
    )
    try:
        bridge.run()
    finally:
        if reload_scheduler is not None:
            reload_scheduler.shutdown(wait=False)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the Submission Notifier.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_arg_parser().parse_args(argv)

    if args.validate_config:
        return 0 if validate_config_file(args.config) else 1

    try:
        # Step 1: Load configuration early (before logging for format detection)
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging; stdout carries listener outcomes in daemon mode
        log_format = app_config.logging.format if app_config.logging else "key-value"
        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(
            level=env_config.log_level,
            format_type=log_format,
            environment=environment,
            stream=sys.stderr,
        )

        logger.info(
            "Submission Notifier starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config),
                "log_level": env_config.log_level,
                "mode": app_config.mode.value,
                "manual_event_count": len(args.event_ids),
            },
        )

        # Step 3: Wire services around a single config holder
        holder = ConfigHolder(
            app_config,
            loader=file_loader(
                args.config,
                transform=lambda config: apply_environment_overrides(config, env_config),
            ),
        )
        service = build_notification_service(holder, env_config)

        logger.info(
            "Services initialized",
            extra={
                "event": "services.initialized",
                "template_count": len(app_config.templates),
                "reload_interval_seconds": app_config.reload_interval_seconds,
            },
        )

        # Step 4: Branch based on mode
        if args.event_ids:
            exit_code = run_manual(service, args.event_ids)
        else:
            exit_code = run_daemon(holder, service)

        uptime_seconds = time.time() - start_time
        logger.info(
            "Submission Notifier stopped",
            extra={"event": "service.stopping", "uptime_seconds": round(uptime_seconds, 2)},
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
