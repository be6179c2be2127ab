#!/usr/bin/env python3
"""Entry point: crawl -> score -> rank -> print the most-liked articles as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback

from config import CRAWL_WINDOW_DAYS, LISTING_MAX_DEPTH, PARALLELISM, TOP_N, validate_config

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    """
    简单的 JSON 日志格式化器 (Simple JSON Log Formatter)
    Produces machine-readable crawl logs for later analysis or monitoring.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(log_format: str) -> None:
    """配置日志系统 (Configure Logging). Logs go to stderr so stdout only carries the JSON result."""
    handler = logging.StreamHandler(sys.stderr)
    if log_format == "json":
        handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.INFO)
    # Connection pool chatter is not useful at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """解析命令行参数 (Parse Command Line Arguments)"""
    parser = argparse.ArgumentParser(
        description="Rank the most-liked vnexpress.net articles of the last days"
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=TOP_N,
        help=f"Number of articles to print (default: {TOP_N})",
    )
    parser.add_argument(
        "--window-days",
        type=int,
        default=CRAWL_WINDOW_DAYS,
        help=f"Trailing window of category listings in days (default: {CRAWL_WINDOW_DAYS})",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=LISTING_MAX_DEPTH,
        help=f"Max listing crawl depth, root page = 1 (default: {LISTING_MAX_DEPTH})",
    )
    parser.add_argument(
        "--parallelism",
        type=int,
        default=PARALLELISM,
        help=f"Concurrent page fetches (default: CPU count, {PARALLELISM})",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log format (text|json)",
    )
    return parser.parse_args(argv)


def render_articles(articles: list) -> str:
    """输出排名 JSON (Pretty-printed JSON array of {url, title, time, likes})."""
    return json.dumps([a.to_dict() for a in articles], ensure_ascii=False, indent=2)


def main(argv: list[str] | None = None) -> int:
    """程序入口点：解析参数，运行抓取，输出排名。"""
    args = parse_args(argv)
    configure_logging(args.log_format)

    valid, errors = validate_config(
        top_n=args.top_n,
        window_days=args.window_days,
        max_depth=args.max_depth,
        parallelism=args.parallelism,
    )
    if not valid:
        for item in errors:
            logger.error("[CONFIG] %s", item)
        return 1

    try:
        from src.crawler.orchestrator import crawl_most_liked

        result = crawl_most_liked(
            top_n=args.top_n,
            window_days=args.window_days,
            max_depth=args.max_depth,
            parallelism=args.parallelism,
        )
    except Exception as exc:
        logger.critical("Crawl failed unexpectedly: %s", exc)
        traceback.print_exc()
        return 1

    print(render_articles(result.ranked))
    if not result.ranked:
        logger.warning("[RANK] No articles collected")
    return 0


if __name__ == "__main__":
    sys.exit(main())
