# main.py
"""
Command line entry point for the news harvester.

    python main.py run              # one full crawl run, then exit
    python main.py serve            # auto-crawl until SIGINT/SIGTERM
    python main.py status           # print stored resume cursors
"""
import argparse
import asyncio
import signal
import sys

from dotenv import load_dotenv
from loguru import logger

from harvester.factories import HarvesterApp, SettingsLoader, build_application
from harvester.interfaces import HarvesterError, RunNotInProgressError
from harvester.utils import parse_interval, setup_logging


def install_stop_handlers(app: HarvesterApp, shutdown: asyncio.Event) -> None:
    """Turn SIGINT/SIGTERM into a cooperative stop of the active run."""
    loop = asyncio.get_running_loop()

    def request_stop(sig_name: str) -> None:
        logger.info(f"⚠️ Received {sig_name}, stopping...")
        shutdown.set()
        app.scheduler.disable()
        try:
            app.control.stop_run()
        except RunNotInProgressError:
            pass

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, request_stop, sig.name)
        except NotImplementedError:
            logger.debug(f"Signal handlers are not supported here, {sig.name} not installed")


async def run_once(app: HarvesterApp) -> int:
    shutdown = asyncio.Event()
    install_stop_handlers(app, shutdown)
    try:
        task = app.control.start_run()
        await task
    finally:
        await app.close()

    last_run = app.metrics.last_run_metrics or {}
    logger.info(f"✅ Run {last_run.get('status', 'finished')}: "
                f"{last_run.get('articles_saved', 0)} articles saved")
    return 0 if last_run.get('status') != 'failed' else 1


async def serve(app: HarvesterApp) -> int:
    shutdown = asyncio.Event()
    install_stop_handlers(app, shutdown)
    try:
        if not app.scheduler.enable():
            logger.error("❌ Auto-crawl could not be enabled, set a valid interval")
            return 1
        await shutdown.wait()

        current = app.orchestrator.current_task
        if current is not None and not current.done():
            logger.info("Waiting for the active run to finish...")
            await current
    finally:
        await app.close()
    logger.info("✅ Harvester shut down")
    return 0


def print_status(app: HarvesterApp) -> int:
    for source, config in app.settings.sources.items():
        state = "enabled" if config.enabled else "disabled"
        print(f"{source.value} ({state}, {config.rate_limit_per_second} req/s)")
        for category, path in config.paths():
            page = app.cursor_store.get_resume_page(source, category, path)
            cursor = page if page is not None else "-"
            print(f"  {category.value:<13} {path:<40} {cursor}")
    app.parse_executor.shutdown(wait=False)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="News harvester")
    parser.add_argument("--config", default=None, help="Path to the YAML configuration")
    parser.add_argument("--log-level", default=None, help="Minimum log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--log-dir", default=None, help="Also write rotating log files to this directory")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run", help="Run one full crawl and exit")
    serve_parser = subparsers.add_parser("serve", help="Crawl on a fixed delay until interrupted")
    serve_parser.add_argument("--interval", default=None, help="Delay between runs, e.g. 1h or 1d12h30m")
    subparsers.add_parser("status", help="Print resume cursors for every configured path")
    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging(args.log_level, args.log_dir)

    try:
        settings = SettingsLoader.load_from_yaml(args.config)
        if args.command == "serve" and args.interval:
            settings.auto_crawl_interval = parse_interval(args.interval)
        app = build_application(settings)
    except HarvesterError as e:
        logger.error(f"❌ {e}")
        return 2

    if args.command == "run":
        return asyncio.run(run_once(app))
    if args.command == "serve":
        return asyncio.run(serve(app))
    return print_status(app)


if __name__ == "__main__":
    sys.exit(main())
