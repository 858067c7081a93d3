# collector/cli.py
import argparse
import logging
import signal
import sys

from .collector import API_HOST, API_PORT, FETCH_TIMEOUT, FETCH_WORKERS, INTERVAL, LOG_LEVEL, StatsCollector
from .display import print_stats
from .errors import StartupError
from .scheduler import TerminalRefresher
from .source import DockerStatsSource

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("docker").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docker-stats-monitor",
        description="Live CPU, memory, network and block I/O stats for running Docker containers.",
    )
    parser.add_argument("-api", "--api", action="store_true", help="start in API mode with web dashboard")
    parser.add_argument("-port", "--port", type=int, default=API_PORT, help="port for API server (use with -api)")
    parser.add_argument("-host", "--host", type=str, default=API_HOST, help="bind address for API server")
    parser.add_argument("-interval", "--interval", type=int, default=INTERVAL, help="update interval in seconds for CLI mode")
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.interval < 1:
        parser.error("-interval must be at least 1 second")
    if not 1 <= args.port <= 65535:
        parser.error("-port must be between 1 and 65535")
    return args


def run_cli(source, interval: int) -> None:
    collector = StatsCollector(source, fetch_timeout=FETCH_TIMEOUT, max_workers=FETCH_WORKERS)
    refresher = TerminalRefresher(collector, print_stats, interval=interval)
    signal.signal(signal.SIGINT, refresher.handle_signal)
    signal.signal(signal.SIGTERM, refresher.handle_signal)
    refresher.run()
    print("\nShutting down...")


def run_api(source, host: str, port: int) -> None:
    import uvicorn

    from dashboard.app.engine import init_engine
    from dashboard.app.main import app

    init_engine(source)
    shown = "localhost" if host in ("0.0.0.0", "") else host
    logger.info("Starting API server on http://%s:%d", shown, port)
    logger.info("Dashboard available at http://%s:%d", shown, port)
    logger.info("API endpoint: http://%s:%d/api/stats", shown, port)
    uvicorn.run(app, host=host, port=port, log_level=LOG_LEVEL.lower())


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging()

    try:
        source = DockerStatsSource.from_env(timeout=FETCH_TIMEOUT, max_pool_size=max(10, FETCH_WORKERS))
    except StartupError as exc:
        logger.error("Failed to create monitor: %s", exc.message)
        return 1

    try:
        if args.api:
            run_api(source, args.host, args.port)
        else:
            run_cli(source, args.interval)
    finally:
        source.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
