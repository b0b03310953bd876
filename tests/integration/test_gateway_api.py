"""Integration tests for the v1 HTTP API.

Drives the full gateway app (middleware, exception handlers, routers)
through the FastAPI test client against an in-memory table store.
"""

import pytest
from fastapi.testclient import TestClient

from redline.common.constants import MASK_TOKEN
from redline.config import Settings
from redline.gateway.dependencies import get_settings
from redline.gateway.main import create_app
from redline.gateway.middleware.correlation import REQUEST_ID_HEADER


def settings_override(**env):
    def override():
        return Settings(_env_file=None, **env)

    return override


@pytest.fixture
def app():
    app = create_app()
    app.dependency_overrides[get_settings] = settings_override()
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def align(client, payload, key_terms=None):
    response = client.post("/v1/transcripts/align", json={"result": payload, "key_terms": key_terms})
    assert response.status_code == 200, response.text
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
        assert response.headers[REQUEST_ID_HEADER].startswith("req_")


class TestAlign:
    def test_card_payload(self, client, card_payload):
        body = align(client, card_payload)

        assert body["transcript"] == "My card is 4111 1111 1111 1111."
        assert body["language_code"] == "eng"
        assert body["drift_offset"] == 0
        entity = body["entities"][0]
        assert entity["entity_type"] == "credit_card"
        assert entity["formatted_timestamp"] == "0:01.500"
        assert entity["located"] is True
        assert body["suggested_columns"] == ["Credit Card"]

    def test_drift_and_key_terms(self, client, call_payload):
        body = align(client, call_payload, key_terms=["calling", "refund"])

        assert body["drift_offset"] == 3
        assert [e["formatted_timestamp"] for e in body["entities"]] == [
            "0:13.000",
            "0:19.000",
            "0:26.000",
            "0:27.000",
            "0:00.000",
        ]
        assert body["entities"][-1]["entity_type"] == "key_term"

    def test_invalid_structure_is_400(self, client):
        response = client.post(
            "/v1/transcripts/align", json={"result": {"text": "x", "entities": "oops"}}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_transcription"

    def test_missing_result_is_400(self, client):
        response = client.post("/v1/transcripts/align", json={})

        assert response.status_code == 400


class TestRedact:
    def test_masks_card(self, client, card_payload):
        response = client.post(
            "/v1/redact",
            json={"text": card_payload["text"], "entities": card_payload["entities"]},
        )

        assert response.status_code == 200
        assert response.json() == {"text": "My card is " + MASK_TOKEN + "."}

    def test_person_names_opt_in(self, client):
        payload = {
            "text": "Ask for Randall Thomas.",
            "entities": [{"entity_type": "person_name", "text": "Randall Thomas"}],
        }

        plain = client.post("/v1/redact", json=payload).json()["text"]
        masked = client.post("/v1/redact", json={**payload, "include_person_names": True}).json()["text"]

        assert plain == "Ask for Randall Thomas."
        assert masked == f"Ask for {MASK_TOKEN}."

    def test_sensitive_types_follow_settings(self, app, client):
        app.dependency_overrides[get_settings] = settings_override(REDLINE_REDACT_PERSON_NAMES=True)

        body = client.get("/v1/sensitive-types").json()

        assert body["include_person_names"] is True
        assert "person_name" in body["entity_types"]
        assert "credit_card" in body["entity_types"]


class TestTable:
    def test_empty_table(self, client):
        assert client.get("/v1/table").json() == {"columns": [], "rows": []}

    def test_column_lifecycle(self, client):
        assert client.post("/v1/table/columns", json={"name": "Phone"}).status_code == 201
        duplicate = client.post("/v1/table/columns", json={"name": "Phone"})
        assert duplicate.status_code == 409
        assert duplicate.json() == {
            "error": {"code": "column_exists", "message": "Column already exists: Phone"}
        }

        renamed = client.patch("/v1/table/columns/Phone", json={"name": "Phone Number"})
        assert renamed.json()["columns"] == ["Phone Number"]

        assert client.delete("/v1/table/columns/Phone Number").status_code == 204
        missing = client.delete("/v1/table/columns/Phone Number")
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "column_not_found"

    def test_blank_column_name_is_400(self, client):
        assert client.post("/v1/table/columns", json={"name": "   "}).status_code == 400

    def test_manual_rows(self, client):
        client.post("/v1/table/columns", json={"name": "Note"})

        created = client.post("/v1/table/rows", json={"cells": {"Note": "called back"}})
        assert created.status_code == 201
        row_id = created.json()["id"]

        updated = client.patch(f"/v1/table/rows/{row_id}", json={"column": "Note", "value": "done"})
        assert updated.json()["cells"] == {"Note": "done"}

        assert client.delete(f"/v1/table/rows/{row_id}").status_code == 204
        assert client.patch(f"/v1/table/rows/{row_id}", json={"column": "Note", "value": "x"}).status_code == 404

    def test_align_aggregate_export(self, client, card_payload, call_payload):
        card = align(client, card_payload)
        call = align(client, call_payload)
        for name in ("Name", "Card", "Phone"):
            client.post("/v1/table/columns", json={"name": name})
        client.post("/v1/table/rows", json={"cells": {"Name": "Walk-in"}, "timestamp": "9:99.999"})

        documents = [
            {"id": "card.json", "entities": card["entities"]},
            {"id": "call.json", "entities": call["entities"]},
        ]
        table = client.post("/v1/table/aggregate", json={"documents": documents}).json()

        rows = {row["id"]: row for row in table["rows"]}
        assert rows["card.json_main"]["cells"] == {"Card": "********"}
        assert rows["card.json_main"]["timestamp"] == "0:01.500"
        assert rows["call.json_main"]["cells"] == {"Name": "Randall Thomas", "Phone": "********"}
        assert rows["call.json_main"]["timestamp"] == "0:13.000"

        again = client.post("/v1/table/aggregate", json={"documents": documents}).json()
        assert again == table

        export = client.get("/v1/table/export")
        assert export.headers["content-type"].startswith("text/csv")
        lines = export.text.split("\n")
        assert lines[0] == "Timestamp,Name,Card,Phone"
        assert '"9:99.999","Walk-in","",""' in lines
        assert '"0:01.500","","********",""' in lines

    def test_aggregate_without_safe_mode(self, client, card_payload):
        card = align(client, card_payload)
        client.post("/v1/table/columns", json={"name": "Card"})

        table = client.post(
            "/v1/table/aggregate",
            json={"documents": [{"id": "card", "entities": card["entities"]}], "safe_mode": False},
        ).json()

        assert table["rows"][0]["cells"] == {"Card": "4111 1111 1111 1111"}

    def test_person_names_override(self, client, call_payload):
        call = align(client, call_payload)
        client.post("/v1/table/columns", json={"name": "Name"})
        documents = [{"id": "call", "entities": call["entities"]}]

        plain = client.post("/v1/table/aggregate", json={"documents": documents}).json()
        hidden = client.post(
            "/v1/table/aggregate", json={"documents": documents, "include_person_names": True}
        ).json()

        assert plain["rows"][0]["cells"] == {"Name": "Randall Thomas"}
        assert hidden["rows"][0]["cells"] == {"Name": "********"}

    def test_withdrawn_document_removed(self, client, card_payload):
        card = align(client, card_payload)
        client.post("/v1/table/columns", json={"name": "Card"})
        client.post(
            "/v1/table/aggregate",
            json={"documents": [{"id": "a", "entities": card["entities"]}, {"id": "b", "entities": card["entities"]}]},
        )

        table = client.post(
            "/v1/table/aggregate", json={"documents": [{"id": "b", "entities": card["entities"]}]}
        ).json()

        assert [row["source_id"] for row in table["rows"]] == ["b"]

    def test_export_without_columns_is_empty(self, client):
        assert client.get("/v1/table/export").text == ""
