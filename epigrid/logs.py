import logging, logging.handlers, os, sys
from datetime import datetime
from pathlib import Path

FORMAT = "%(asctime)s | %(processName)s[%(process)d] | %(levelname)s | %(name)s | %(message)s"
WORKER_FORMAT = "%(asctime)s | worker[%(process)d] | %(levelname)s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10_000_000


def _rotating(path, fmt, level, backups):
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=backups, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(fmt, datefmt=DATEFMT))
    handler.setLevel(level)
    return handler


def setup_main_logging(log_dir="logs", level=logging.INFO):
    """Send the parent process' logs to stdout and to log_dir/run-<timestamp>.log."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    run_log = log_dir / f"run-{datetime.now():%Y%m%d-%H%M%S}.log"

    logging.captureWarnings(True)
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(FORMAT, datefmt=DATEFMT))
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    # calling twice must not duplicate output
    root.handlers[:] = [console, _rotating(run_log, FORMAT, level, backups=5)]
    logging.getLogger(__name__).info("Logging to %s", run_log)
    return run_log


def init_worker_logging(log_dir="logs", level=logging.INFO):
    """Process-pool initializer: each sweep worker writes log_dir/worker-<pid>.log."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    worker_log = log_dir / f"worker-{os.getpid()}.log"

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(_rotating(worker_log, WORKER_FORMAT, level, backups=2))
    logging.getLogger(__name__).info("Worker logging to %s", worker_log)
    return worker_log
