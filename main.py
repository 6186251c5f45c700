"""Entry point for the golog collector: HTTP log messages in, one append-only log file out."""

import argparse
import logging
import signal
import sys
import threading

from src.config import InvalidLogLevelError, load_config, load_yaml_config
from src.funnel import start_funnel
from src.logfile import LogFileError, open_log_file
from src.transport import UnsupportedModeError, build_transport

logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="golog",
        description="Collect client log messages into one append-only file.",
    )
    parser.add_argument(
        "--logfile", default=None,
        help="path to log file (default: log.txt)",
    )
    parser.add_argument(
        "--mode", default=None,
        help="which protocol to listen on (http | zmq) (default: http)",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to YAML config file",
    )
    return parser


def main(argv=None):
    args = build_cli_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [golog] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args, load_yaml_config(args.config))
    except (UnsupportedModeError, InvalidLogLevelError) as exc:
        sys.exit(str(exc))
    logging.getLogger().setLevel(config.log_level)

    try:
        log_file = open_log_file(config.logfile)
    except LogFileError as exc:
        sys.exit(str(exc))

    # the funnel is the only writer to log_file from here on
    funnel = start_funnel(log_file, fsync=config.fsync)
    server = build_transport(config, funnel)
    try:
        server.bind()
    except OSError as exc:
        funnel.close()
        sys.exit(f"{config.mode.value} transport failed: {exc}")

    shutdown_event = threading.Event()
    failure = []

    def signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def serve():
        try:
            server.start()
        except OSError as exc:
            failure.append(exc)
        finally:
            shutdown_event.set()

    server_thread = threading.Thread(target=serve, name="transport", daemon=True)
    server_thread.start()
    shutdown_event.wait()

    server.stop()
    server_thread.join(timeout=5)
    funnel.close()

    if failure:
        sys.exit(f"{config.mode.value} transport failed: {failure[0]}")


if __name__ == "__main__":
    main()
