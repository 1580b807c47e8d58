"""
SHG Document Route Tests
========================

Tests for the /shg/{shg_id}/documents endpoints.
"""

from urllib.parse import quote

from fastapi import status

MEMBER_LOANS = "Loan Taken & Repayment by Members"


def document_url(shg_id: str, doc_type: str) -> str:
    return f"/shg/{shg_id}/documents/{quote(doc_type, safe='')}"


class TestSaveDocument:
    """Tests for PUT /shg/{shg_id}/documents/{doc_type}."""

    def test_save_table_list(self, client, members_table):
        response = client.put(
            document_url("shg-1", "Savings"),
            json={"contents": [members_table.to_payload()]},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["shg_id"] == "shg-1"
        assert data["doc_type"] == "Savings"
        assert data["contents"] == [members_table.to_payload()]

    def test_save_normalizes_contents(self, client, shg_profile_payload):
        response = client.put(
            document_url("shg-1", "SHG Profile"),
            json={"contents": shg_profile_payload},
        )

        titles = [table["title"] for table in response.json()["contents"]]
        assert titles == ["SHG PROFILE", "DETAILS OF MEMBERS", "BALANCE SHEET"]

    def test_save_replaces(self, client, documents_repository):
        url = document_url("shg-1", MEMBER_LOANS)
        client.put(url, json={"contents": [{"title": "Lalita", "rows": [["1"]]}]})

        response = client.put(url, json={"contents": [{"title": "Meena", "rows": [["2"]]}]})

        assert [t["title"] for t in response.json()["contents"]] == ["Meena"]
        assert len(documents_repository.documents) == 1

    def test_missing_contents(self, client):
        response = client.put(document_url("shg-1", "Savings"), json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestReadDocuments:
    """Tests for GET and list endpoints."""

    def test_get(self, client, members_table):
        client.put(document_url("shg-1", MEMBER_LOANS), json={"contents": [members_table.to_payload()]})

        response = client.get(document_url("shg-1", MEMBER_LOANS))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["doc_type"] == MEMBER_LOANS

    def test_get_missing(self, client):
        response = client.get(document_url("shg-1", "Savings"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "NotFoundError"

    def test_list(self, client):
        client.put(document_url("shg-1", "Savings"), json={"contents": []})
        client.put(document_url("shg-1", "Receipts by SHG"), json={"contents": []})
        client.put(document_url("shg-2", "Savings"), json={"contents": []})

        response = client.get("/shg/shg-1/documents")

        assert response.status_code == status.HTTP_200_OK
        assert [d["doc_type"] for d in response.json()] == ["Receipts by SHG", "Savings"]

    def test_list_empty(self, client):
        assert client.get("/shg/unknown/documents").json() == []


class TestEditDocument:
    """Tests for PATCH /shg/{shg_id}/documents/{doc_type}."""

    def test_edit_second_table(self, client, members_table):
        url = document_url("shg-1", MEMBER_LOANS)
        client.put(
            url,
            json={
                "contents": [
                    members_table.to_payload(),
                    {"title": "Meena", "columns": ["MONTH", "PAID"], "rows": [["Apr", "100"]]},
                ]
            },
        )

        response = client.patch(
            url,
            json={
                "operations": [
                    {"op": "set_cell", "table_index": 1, "row": 0, "column": 1, "value": "150"},
                    {"op": "append_row", "table_index": 1, "values": ["May", "100"]},
                ]
            },
        )

        assert response.status_code == status.HTTP_200_OK
        contents = response.json()["contents"]
        assert contents[0] == members_table.to_payload()
        assert contents[1]["rows"] == [["Apr", "150"], ["May", "100"]]

    def test_edit_table_index_out_of_range(self, client, members_table):
        url = document_url("shg-1", "Savings")
        client.put(url, json={"contents": [members_table.to_payload()]})

        response = client.patch(
            url,
            json={"operations": [{"op": "remove_row", "table_index": 3, "row": 0}]},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_edit_missing(self, client):
        response = client.patch(
            document_url("shg-1", "Savings"),
            json={"operations": [{"op": "append_row"}]},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteDocument:
    """Tests for DELETE /shg/{shg_id}/documents/{doc_type}."""

    def test_delete(self, client):
        url = document_url("shg-1", "Savings")
        client.put(url, json={"contents": []})

        response = client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(url).status_code == status.HTTP_404_NOT_FOUND

    def test_delete_missing(self, client):
        response = client.delete(document_url("shg-1", "Savings"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
