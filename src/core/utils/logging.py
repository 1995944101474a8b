import logging
import queue
import threading
import traceback
from collections.abc import Mapping
from html import escape

import requests


class TelegramErrorHandler(logging.Handler):
    """
    Forwards error records to a Telegram chat through the Bot API.

    Messages are queued and posted from a daemon thread so a slow Telegram
    never blocks a request. Without a bot token or chat id the handler is inert.
    """

    CONTEXT_FIELDS = ("user", "method", "path", "ip", "request_id")

    def __init__(self, bot_token, chat_id, level=logging.ERROR, max_queue=100):
        super().__init__(level)
        self.enabled = bool(str(bot_token or "").strip() and str(chat_id or "").strip())
        self.api_url = f"https://api.telegram.org/bot{bot_token}/sendMessage"
        self.chat_id = chat_id
        self.queue = queue.Queue(maxsize=max_queue)
        self.worker = None

        if self.enabled:
            self.worker = threading.Thread(target=self._worker, daemon=True)
            self.worker.start()

    def emit(self, record):
        if not self.enabled:
            return
        try:
            self.queue.put_nowait(self.format(self._escaped_record(record)))
        except queue.Full:
            pass  # alert storm: newest alerts are dropped

    def _escaped_record(self, record):
        safe_record = logging.makeLogRecord(record.__dict__.copy())
        safe_record.exc_info = None
        safe_record.exc_text = None
        safe_record.msg = escape(str(record.getMessage()), quote=False)
        safe_record.args = ()
        for field in self.CONTEXT_FIELDS:
            value = getattr(record, field, "-")
            setattr(safe_record, field, escape(str(value), quote=False))
        safe_record.traceback = escape(
            str(getattr(record, "traceback", "No traceback")), quote=False
        )
        return safe_record

    def _worker(self):
        session = requests.Session()
        while True:
            msg = self.queue.get()
            try:
                session.post(
                    self.api_url,
                    json={
                        "chat_id": self.chat_id,
                        "text": msg[:4000],
                        "parse_mode": "HTML",
                    },
                    timeout=5,
                )
            except requests.RequestException:
                pass
            finally:
                self.queue.task_done()


class RequestContextFilter(logging.Filter):
    """
    Adds request/user/IP/path/method/request_id + traceback info to log records.
    """

    def filter(self, record):
        request = getattr(record, "request", None)

        if self._is_request_context(request):
            user = getattr(request, "user", None)
            record.user = getattr(user, "username", None) or "Anonymous"
            record.method = getattr(request, "method", "-")
            record.path = getattr(request, "path", "-")
            meta = getattr(request, "META", {})
            record.ip = (
                meta.get("REMOTE_ADDR", "-") if isinstance(meta, Mapping) else "-"
            )
            record.request_id = getattr(request, "request_id", "-")
        else:
            record.user = "Unknown"
            record.method = "-"
            record.path = "-"
            record.ip = "-"
            record.request_id = "-"

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            record.traceback = "".join(
                traceback.format_exception(exc_type, exc_value, exc_tb)
            )
        else:
            record.traceback = "No traceback"

        return True

    @staticmethod
    def _is_request_context(request) -> bool:
        """
        Dev-server records can carry a socket under `request`; only HTTP requests count.
        """
        return (
            request is not None
            and hasattr(request, "method")
            and hasattr(request, "path")
            and hasattr(request, "META")
        )
