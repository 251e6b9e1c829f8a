"""
Ingest Client Module - Write path into a channel

Each request body becomes exactly one record on the channel.
"""
import logging
import time
from typing import Iterable, Optional, Tuple

import requests


class IngestClient:

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        max_retries: int = 3,
        retry_delay: float = 5,
        timeout: float = 30,
    ):
        """
        Args:
            url: Channel URL (the same endpoint the viewer subscribes to)
            session: Optional requests.Session to reuse
            max_retries: Attempts per record before giving up
            retry_delay: Seconds between retries after timeouts or connection errors
            timeout: Per-request timeout in seconds
        """
        self.url = url
        self.session = session or requests.Session()
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.headers = {"Content-Type": "text/plain; charset=utf-8"}
        self.logger = logging.getLogger(__name__)

    def send(self, body: str) -> Tuple[bool, str]:
        """
        POST one record with error handling and retries

        Returns:
            (success, message) where message is the server reply or the error
        """
        for attempt in range(self.max_retries):
            try:
                response = self.session.post(
                    self.url,
                    data=body.encode("utf-8"),
                    headers=self.headers,
                    timeout=self.timeout,
                )

                # Channel is being throttled
                if response.status_code == 429:
                    retry_after = self._retry_after(response)
                    self.logger.warning(f"Rate limited by server. Retry after {retry_after} seconds.")
                    if attempt < self.max_retries - 1:
                        time.sleep(retry_after)
                        continue

                response.raise_for_status()
                return True, response.text.strip() or "ok"

            except requests.exceptions.Timeout:
                self.logger.error(f"Request timeout for {self.url}")
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay)
                    continue
                return False, "Request timeout after multiple attempts"

            except requests.exceptions.ConnectionError as e:
                self.logger.error(f"Connection error: {e}")
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay)
                    continue
                return False, f"Connection error: {e}"

            except requests.RequestException as e:
                self.logger.error(f"Request error: {e}")
                return False, f"Error during request: {e}"

        return False, "Max retries exceeded"

    def send_lines(self, lines: Iterable[str]) -> Tuple[int, int]:
        """
        Send every non-blank line as its own record

        Returns:
            (sent, failed) counts
        """
        sent = failed = 0
        for line in lines:
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            success, message = self.send(line)
            if success:
                sent += 1
            else:
                failed += 1
                self.logger.warning(f"Dropped record after errors: {message}")
        return sent, failed

    @staticmethod
    def _retry_after(response: requests.Response, default: int = 60) -> int:
        try:
            return int(response.headers.get("Retry-After", default))
        except (TypeError, ValueError):
            return default
