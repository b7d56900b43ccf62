"""HTTP server entrypoints for invoice rendering."""

from __future__ import annotations

import errno
import json
import sys
import traceback
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional, Tuple, cast
from urllib.parse import urlsplit

from .config import ACCESS_LOG, LISTEN_BACKLOG, MAX_BODY_BYTES as MAX_BODY_BYTES_CONFIG, MAX_ITEMS as MAX_ITEMS_CONFIG
from .models import InvoiceRequest, ValidationError, parse_invoice_request

GENERATE_PATH = "/api/generate-invoice"
HEALTH_PATHS = ("/health", "/healthz")

ErrorResponse = Tuple[int, Dict[str, Any]]

DISCONNECT_ERRNOS = frozenset(
    code
    for code in (
        errno.EPIPE,
        errno.ECONNRESET,
        errno.ETIMEDOUT,
        getattr(errno, "WSAECONNRESET", None),
    )
    if code is not None
)


class DependencyError(RuntimeError):
    """Raised when a required runtime dependency is missing."""


def is_client_disconnect(exc: BaseException) -> bool:
    if isinstance(exc, (BrokenPipeError, ConnectionResetError, TimeoutError)):
        return True
    return isinstance(exc, OSError) and exc.errno in DISCONNECT_ERRNOS


def load_render_invoice():
    try:
        from .rendering import render_invoice
    except ModuleNotFoundError as exc:
        if exc.name == "fpdf":
            raise DependencyError(
                "Missing dependency 'fpdf'. Install the project with 'pip install .' "
                "to pull in fpdf2."
            ) from exc
        raise
    return render_invoice


def validate_invoice_payload(
    body: bytes,
    max_items: int = MAX_ITEMS_CONFIG,
) -> Tuple[Optional[InvoiceRequest], Optional[ErrorResponse]]:
    """Decode and validate a request body.

    Returns ``(invoice, None)`` on success and ``(None, (status, payload))``
    when the request must be rejected.
    """
    if body.strip():
        try:
            payload = json.loads(body.decode("utf-8"))
        except UnicodeDecodeError:
            return None, (400, {"error": "Invalid JSON body", "detail": "Body must be UTF-8 encoded JSON."})
        except json.JSONDecodeError as exc:
            return None, (
                400,
                {
                    "error": "Invalid JSON body",
                    "detail": f"{exc.msg} (line {exc.lineno}, column {exc.colno})",
                },
            )
        except (ValueError, RecursionError) as exc:
            return None, (400, {"error": "Invalid JSON body", "detail": str(exc)})
    else:
        payload = {}

    items = payload.get("items") if isinstance(payload, dict) else None
    if isinstance(items, list) and len(items) > max_items:
        return None, (413, {"error": "Too many line items", "max_items": max_items})

    try:
        invoice = parse_invoice_request(payload)
    except ValidationError as exc:
        return None, (exc.status, {"error": str(exc)})
    return invoice, None


class InvoiceHandler(BaseHTTPRequestHandler):
    MAX_BODY_BYTES = MAX_BODY_BYTES_CONFIG
    MAX_ITEMS = MAX_ITEMS_CONFIG
    ACCESS_LOG = ACCESS_LOG

    def _route(self) -> str:
        return urlsplit(self.path).path.rstrip("/") or "/"

    def _send_cors_headers(self) -> None:
        self.send_header("Access-Control-Allow-Origin", "*")

    def _write_response(
        self,
        status: int,
        content_type: str,
        body: bytes,
        headers: Optional[Dict[str, str]] = None,
    ) -> bool:
        try:
            self.send_response(status)
            self._send_cors_headers()
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            for name, value in (headers or {}).items():
                self.send_header(name, value)
            self.end_headers()
            self.wfile.write(body)
            return True
        except Exception as exc:
            if is_client_disconnect(exc):
                return False
            raise

    def _send_json(self, status: int, payload: Dict[str, Any]) -> bool:
        body = json.dumps(payload).encode("utf-8")
        return self._write_response(status, "application/json", body)

    def _read_body(self) -> Optional[bytes]:
        header = self.headers.get("Content-Length")
        if header is None:
            if self.headers.get("Transfer-Encoding") is None:
                return b""
            self._send_json(411, {"error": "Content-Length header is required"})
            return None

        try:
            content_length = int(header)
        except ValueError:
            self._send_json(400, {"error": "Content-Length must be an integer"})
            return None

        if content_length < 0:
            self._send_json(400, {"error": "Content-Length must be an integer"})
            return None

        if content_length > self.MAX_BODY_BYTES:
            self._send_json(413, {"error": f"Body exceeds {self.MAX_BODY_BYTES} bytes"})
            return None

        try:
            return self.rfile.read(content_length)
        except Exception as exc:
            if is_client_disconnect(exc):
                return None
            raise

    def do_OPTIONS(self) -> None:
        try:
            self.send_response(204)
            self._send_cors_headers()
            self.send_header("Access-Control-Allow-Methods", "GET,HEAD,PUT,PATCH,POST,DELETE")
            requested = self.headers.get("Access-Control-Request-Headers")
            if requested:
                self.send_header("Access-Control-Allow-Headers", requested)
            self.send_header("Content-Length", "0")
            self.end_headers()
        except Exception as exc:
            if not is_client_disconnect(exc):
                raise

    def do_POST(self) -> None:
        if self._route() != GENERATE_PATH:
            self._send_json(404, {"error": "Not found"})
            return

        body = self._read_body()
        if body is None:
            return

        invoice, error = validate_invoice_payload(body, self.MAX_ITEMS)
        if error is not None:
            status, payload_body = error
            self._send_json(status, payload_body)
            return
        invoice = cast(InvoiceRequest, invoice)

        try:
            pdf_bytes = load_render_invoice()(invoice)
        except Exception as exc:
            traceback.print_exc(file=sys.stderr)
            self._send_json(500, {"error": "Failed to generate invoice", "detail": str(exc)})
            return

        self._write_response(
            200,
            "application/pdf",
            pdf_bytes,
            headers={"Content-Disposition": f"attachment; filename={invoice.filename}"},
        )

    def do_GET(self) -> None:
        if self._route() in HEALTH_PATHS:
            self._send_json(200, {"status": "ok"})
            return
        self._send_json(404, {"error": "Not found"})

    def handle_one_request(self) -> None:
        try:
            super().handle_one_request()
        except Exception as exc:
            if is_client_disconnect(exc):
                return
            raise

    def log_message(self, format: str, *args: Any) -> None:
        if self.ACCESS_LOG:
            super().log_message(format, *args)


class InvoiceHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True
    request_queue_size = LISTEN_BACKLOG


def run(host: str = "0.0.0.0", port: int = 5000) -> None:
    load_render_invoice()
    server = InvoiceHTTPServer((host, port), InvoiceHandler)
    print(f"Server is running on http://{host}:{port}")
    try:
        server.serve_forever()
    finally:
        server.server_close()
