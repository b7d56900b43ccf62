import http.client
import json
import threading
import unittest
from importlib import util as importlib_util
from typing import Any, Dict, Optional, Tuple
from unittest.mock import patch

from gst_invoice.server import InvoiceHandler, InvoiceHTTPServer

FPDF_AVAILABLE = importlib_util.find_spec("fpdf") is not None


class ServerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.server = InvoiceHTTPServer(("127.0.0.1", 0), InvoiceHandler)
        cls.port = cls.server.server_address[1]
        cls.thread = threading.Thread(target=cls.server.serve_forever, daemon=True)
        cls.thread.start()

    @classmethod
    def tearDownClass(cls) -> None:
        cls.server.shutdown()
        cls.server.server_close()
        cls.thread.join(timeout=5)

    def _request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[http.client.HTTPResponse, bytes]:
        connection = http.client.HTTPConnection("127.0.0.1", self.port, timeout=10)
        body = None if payload is None else json.dumps(payload).encode("utf-8")
        request_headers = {"Content-Type": "application/json"}
        request_headers.update(headers or {})
        connection.request(method, path, body=body, headers=request_headers)
        response = connection.getresponse()
        data = response.read()
        connection.close()
        return response, data

    def _payload(self, **overrides):
        payload = {
            "invoice_num": "42",
            "bill_to": "Acme Traders",
            "ship_to": "Acme Warehouse",
            "gst_num": "29ABCDE1234F1Z5",
            "items": [{"item_desc": "Widget", "qty": 2, "rate_item": 100, "tax": 18}],
        }
        payload.update(overrides)
        return payload

    @unittest.skipUnless(FPDF_AVAILABLE, "fpdf is not installed")
    def test_generate_invoice_returns_pdf_attachment(self) -> None:
        rendered = []

        from gst_invoice.rendering import render_invoice

        def capture(invoice):
            rendered.append(invoice)
            return render_invoice(invoice, signature_path="")

        with patch("gst_invoice.server.load_render_invoice", return_value=capture):
            response, body = self._request("POST", "/api/generate-invoice", self._payload())

        self.assertEqual(response.status, 200)
        self.assertEqual(response.getheader("Content-Type"), "application/pdf")
        self.assertEqual(response.getheader("Content-Disposition"), "attachment; filename=invoice_42.pdf")
        self.assertEqual(response.getheader("Access-Control-Allow-Origin"), "*")
        self.assertTrue(body.startswith(b"%PDF"))
        self.assertEqual(int(rendered[0].total_amount), 200)

    def test_missing_gst_number_is_rejected(self) -> None:
        payload = self._payload()
        del payload["gst_num"]

        response, body = self._request("POST", "/api/generate-invoice", payload)

        self.assertEqual(response.status, 400)
        self.assertEqual(json.loads(body), {"error": "Missing or invalid required fields"})

    def test_non_numeric_quantity_is_rejected(self) -> None:
        items = [{"item_desc": "Widget", "qty": "two", "rate_item": 100, "tax": 18}]

        response, body = self._request("POST", "/api/generate-invoice", self._payload(items=items))

        self.assertEqual(response.status, 400)
        self.assertEqual(json.loads(body), {"error": "Invalid item data: ensure all fields are correct"})

    def test_unparseable_json_gets_a_response(self) -> None:
        connection = http.client.HTTPConnection("127.0.0.1", self.port, timeout=10)
        body = b"[" * 100000 + b"]" * 100000
        connection.request("POST", "/api/generate-invoice", body=body, headers={"Content-Type": "application/json"})
        response = connection.getresponse()
        data = response.read()
        connection.close()

        self.assertEqual(response.status, 400)
        self.assertEqual(json.loads(data)["error"], "Invalid JSON body")

    def _raw_post(self, headers: Dict[str, str], body: bytes = b"") -> Tuple[http.client.HTTPResponse, bytes]:
        connection = http.client.HTTPConnection("127.0.0.1", self.port, timeout=10)
        connection.putrequest("POST", "/api/generate-invoice")
        for name, value in headers.items():
            connection.putheader(name, value)
        connection.endheaders(body)
        response = connection.getresponse()
        data = response.read()
        connection.close()
        return response, data

    def test_missing_content_length_reads_as_empty_body(self) -> None:
        response, body = self._raw_post({"Content-Type": "application/json"})

        self.assertEqual(response.status, 400)
        self.assertEqual(json.loads(body), {"error": "Missing or invalid required fields"})

    def test_chunked_body_requires_content_length(self) -> None:
        response, body = self._raw_post(
            {"Content-Type": "application/json", "Transfer-Encoding": "chunked"},
            b"2\r\n{}\r\n0\r\n\r\n",
        )

        self.assertEqual(response.status, 411)
        self.assertEqual(json.loads(body), {"error": "Content-Length header is required"})

    def test_render_failure_is_reported(self) -> None:
        def broken(invoice):
            raise RuntimeError("canvas exploded")

        with patch("gst_invoice.server.load_render_invoice", return_value=broken), patch(
            "gst_invoice.server.traceback.print_exc"
        ):
            response, body = self._request("POST", "/api/generate-invoice", self._payload())

        self.assertEqual(response.status, 500)
        self.assertEqual(json.loads(body)["error"], "Failed to generate invoice")

    def test_cors_preflight(self) -> None:
        response, _ = self._request(
            "OPTIONS",
            "/api/generate-invoice",
            headers={"Origin": "http://example.com", "Access-Control-Request-Headers": "content-type"},
        )

        self.assertEqual(response.status, 204)
        self.assertEqual(response.getheader("Access-Control-Allow-Origin"), "*")
        self.assertIn("POST", response.getheader("Access-Control-Allow-Methods"))
        self.assertEqual(response.getheader("Access-Control-Allow-Headers"), "content-type")

    def test_health_endpoint(self) -> None:
        response, body = self._request("GET", "/health")

        self.assertEqual(response.status, 200)
        self.assertEqual(json.loads(body), {"status": "ok"})

    def test_unknown_path_is_not_found(self) -> None:
        response, body = self._request("POST", "/generate", self._payload())

        self.assertEqual(response.status, 404)
        self.assertEqual(json.loads(body), {"error": "Not found"})


if __name__ == "__main__":
    unittest.main()
