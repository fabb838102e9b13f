"""主入口"""

import argparse
import logging
import os
import sys
from concurrent.futures import as_completed
from typing import Optional

from tqdm import tqdm

from config.settings import Config, RequestConfig
from core.exceptions import ConfigurationError
from core.models import MAX_CONCURRENCY, RequestResult, TransportKind
from services.request_queue import RequestQueue
from transports.base import list_transports, load_transport
from utils.logging_config import setup_logging


def run_requests(urls: list[str], queue: RequestQueue) -> list[tuple[str, RequestResult]]:
    """通过队列并发请求所有 URL，按完成顺序返回结果"""
    futures = {queue.fetch(url): url for url in urls}
    results: list[tuple[str, RequestResult]] = []

    with tqdm(total=len(urls), desc="Requesting", unit="req") as pbar:
        for future in as_completed(futures):
            results.append((futures[future], future.result()))
            pbar.update(1)
            pbar.set_postfix({"In flight": queue.in_flight, "Pending": queue.pending})

    return results


def print_report(results: list[tuple[str, RequestResult]]):
    """打印控制台报告"""
    print("\n" + "=" * 60)
    print("                    请求报告")
    print("=" * 60)

    for url, result in sorted(results, key=lambda x: x[0]):
        if result.ok:
            ttl = "-" if result.ttl is None else f"{result.ttl}s"
            print(f"[✓] {url} │ TTL {ttl}")
        else:
            print(f"[✗] {url} │ {result.error}")

    success_count = sum(1 for _, r in results if r.ok)
    print("-" * 60)
    print(
        f"总计: {len(results)} │ 成功: {success_count} │ 失败: {len(results) - success_count}"
    )
    print("=" * 60 + "\n")


def print_transports():
    """打印传输方式及可用性"""
    print("Supported transports:")
    for kind in list_transports():
        status = "available" if load_transport(kind) else "unavailable"
        print(f"  - {kind.value} ({status})")


def main(argv: Optional[list[str]] = None) -> int:
    """主入口函数"""
    parser = argparse.ArgumentParser(
        description=f"Fetch JSON URLs with at most {MAX_CONCURRENCY} requests in flight"
    )
    parser.add_argument("urls", nargs="*", help="URLs to request")
    parser.add_argument(
        "--transport",
        nargs="*",
        choices=[kind.value for kind in list_transports()],
        help="Transport preference order. If empty, the configured order is used",
    )
    parser.add_argument(
        "--list-transports",
        action="store_true",
        help="List all transports with their availability and exit",
    )

    args = parser.parse_args(argv)
    setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))

    if args.list_transports:
        print_transports()
        return 0

    if not args.urls:
        parser.error("at least one URL is required")

    request_config = Config().request
    if args.transport:
        request_config = RequestConfig(
            transports=[TransportKind(name) for name in args.transport],
            timeout=request_config.timeout,
            verify_ssl=request_config.verify_ssl,
            user_agent=request_config.user_agent,
        )

    queue = RequestQueue(config=request_config)
    try:
        results = run_requests(args.urls, queue)
    except ConfigurationError as e:
        logging.error(str(e))
        return 2
    finally:
        queue.close()

    print_report(results)
    return 0 if all(r.ok for _, r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
