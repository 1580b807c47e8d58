"""
Upload Route Tests
==================

Tests for POST /upload (multipart and JSON base64 bodies), error mapping
and the health endpoint.
"""

import base64
import json

from fastapi import status

from lekhapal.utils.errors import UpstreamApiError

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\n"


class TestUploadMultipart:
    """Tests for multipart uploads."""

    def test_csv_upload(self, client, table_repository, extraction_client):
        response = client.post(
            "/upload",
            files={"file": ("members.csv", b"name,age\nA,1\nB,2", "text/csv")},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["tableId"] == 1
        assert data["tables"] == [
            {"title": "members.csv", "columns": ["name", "age"], "rows": [["A", "1"], ["B", "2"]]}
        ]
        assert table_repository.tables[1].columns == ["name", "age"]
        extraction_client.extract.assert_not_awaited()

    def test_pdf_upload_with_document_type(self, client, extraction_client):
        extraction_client.extract.return_value = json.dumps(
            {"shgProfile": {"shgName": "Jai Maa Durga SHG"}}
        )

        response = client.post(
            "/upload",
            files={"file": ("profile.pdf", PDF_BYTES, "application/pdf")},
            data={"document_type": "SHG Profile"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["tables"] == [
            {
                "title": "SHG PROFILE",
                "columns": ["Field", "Value"],
                "rows": [["shgName", "Jai Maa Durga SHG"]],
            }
        ]
        assert '"shgProfile"' in extraction_client.extract.await_args.args[2]

    def test_missing_file_field(self, client):
        response = client.post("/upload", data={"document_type": "Savings"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_no_body(self, client):
        response = client.post("/upload")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "No file provided"


class TestUploadJson:
    """Tests for JSON base64 uploads."""

    def test_data_uri(self, client):
        payload = "data:text/csv;base64," + base64.b64encode(b"a,b\n1,2").decode()

        response = client.post("/upload", json={"data": payload, "name": "pair.csv"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["tables"][0]["rows"] == [["1", "2"]]

    def test_plain_base64_under_file_key(self, client):
        response = client.post(
            "/upload",
            json={
                "file": base64.b64encode(b"x\n9").decode(),
                "name": "x.csv",
                "type": "text/csv",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["tables"][0]["columns"] == ["x"]

    def test_malformed_base64(self, client):
        response = client.post("/upload", json={"base64": "%%%not-base64", "name": "x.csv"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "ValidationError"

    def test_missing_payload(self, client):
        response = client.post("/upload", json={"name": "x.csv"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_json_body(self, client):
        response = client.post(
            "/upload",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestUploadErrors:
    """Tests for the error-to-status mapping."""

    def test_unsupported_type(self, client):
        response = client.post(
            "/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "UnsupportedFileTypeError"

    def test_too_large(self, client, settings):
        content = b"a\n" + b"1\n" * (settings.max_file_size_bytes // 2 + 1)

        response = client.post("/upload", files={"file": ("big.csv", content, "text/csv")})

        assert response.status_code == 413

    def test_no_tables(self, client, extraction_client):
        extraction_client.extract.return_value = "[]"

        response = client.post(
            "/upload", files={"file": ("scan.pdf", PDF_BYTES, "application/pdf")}
        )

        assert response.status_code == 422
        assert response.json()["error"] == "NoTablesExtractedError"

    def test_csv_parse_failure(self, client):
        response = client.post(
            "/upload",
            files={"file": ("bad.csv", b"a,b\n1,2,3", "text/csv")},
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == "ParsingError"

    def test_invalid_model_output(self, client, extraction_client):
        extraction_client.extract.return_value = "Sorry, no tables here."

        response = client.post(
            "/upload", files={"file": ("scan.pdf", PDF_BYTES, "application/pdf")}
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        body = response.json()
        assert body["error"] == "InvalidExtractionResponseError"
        assert body["detail"]["raw"] == "Sorry, no tables here."

    def test_upstream_failure(self, client, extraction_client):
        extraction_client.extract.side_effect = UpstreamApiError(message="Extraction API error")

        response = client.post(
            "/upload", files={"file": ("scan.pdf", PDF_BYTES, "application/pdf")}
        )

        assert response.status_code == status.HTTP_502_BAD_GATEWAY


class TestHealth:
    """Tests for GET /health and the middleware headers."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["service"] == "lekhapal"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["extraction"]["status"] == "configured"
        assert data["status"] == "healthy"

    def test_correlation_headers(self, client):
        response = client.get("/")

        assert "X-Request-ID" in response.headers
        assert float(response.headers["X-Process-Time"]) >= 0
