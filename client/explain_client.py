"""Simple HTTP client for manual testing of the explanation endpoint."""

from __future__ import annotations

import argparse
import logging
import mimetypes
import pathlib
import time

import httpx

DEFAULT_URL = "http://127.0.0.1:3000/api/explain"


def run_client(url: str, text: str, attachment: pathlib.Path | None, timeout: float) -> str:
    """Post a submission and return the explanation text."""

    logger = logging.getLogger("explain_client")
    start = time.perf_counter()

    files = None
    if attachment is not None:
        content_type = mimetypes.guess_type(attachment.name)[0] or "application/octet-stream"
        files = {"file": (attachment.name, attachment.read_bytes(), content_type)}
        logger.info("Attaching %s (%s)", attachment.name, content_type)

    response = httpx.post(url, data={"text": text}, files=files, timeout=timeout)
    body = response.json()

    if response.is_error:
        logger.error("Received error %d: %s", response.status_code, body.get("error"))
        raise SystemExit(1)

    elapsed = time.perf_counter() - start
    logger.info("Received explanation (%d chars) in %.2fs", len(body["explanation"]), elapsed)
    return body["explanation"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Test client for the explanation service.")
    parser.add_argument("--url", default=DEFAULT_URL, help="Endpoint URL (default: %(default)s)")
    parser.add_argument("--text", default="", help="Text to explain.")
    parser.add_argument("--file", type=pathlib.Path, help="Optional file to attach.")
    parser.add_argument(
        "--timeout", type=float, default=60.0, help="Seconds to wait for the explanation."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    print(run_client(args.url, args.text, args.file, args.timeout))


if __name__ == "__main__":  # pragma: no cover
    main()
