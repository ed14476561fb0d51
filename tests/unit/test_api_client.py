from __future__ import annotations

from pathlib import Path

import pytest
import requests

from invoice_importer.api.client import ExportProClient, NetworkError, RequestMetrics
from invoice_importer.models.candidate_invoice import CandidateInvoice, LineItem
from invoice_importer.models.config_models import ApiConfig
from invoice_importer.models.import_outcome import ResponseContractError


@pytest.fixture()
def client(http_session) -> ExportProClient:
    return ExportProClient("http://exportpro.test/api/", timeout=5, session=http_session)


def test_import_posts_whole_batch(client, http_session, make_response, outcome_body):
    http_session.request.return_value = make_response(json_body=outcome_body(ok=2))
    candidates = [
        CandidateInvoice(invoice_number="INV-1", items=(LineItem(product_name="Paracetamol", quantity=1),)),
        CandidateInvoice(invoice_number="INV-2", due_date="2024-01-31"),
    ]
    outcome = client.import_invoices(candidates)

    assert outcome.success and outcome.successful_records == 2
    http_session.request.assert_called_once()
    args, kwargs = http_session.request.call_args
    assert args == ("POST", "http://exportpro.test/api/invoices/import")
    assert kwargs["timeout"] == 5
    sent = kwargs["json"]["invoices"]
    assert [s["invoiceNumber"] for s in sent] == ["INV-1", "INV-2"]
    assert "dueDate" not in sent[0]
    assert sent[1]["dueDate"] == "2024-01-31"


def test_connection_error_becomes_network_error(client, http_session):
    http_session.request.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(NetworkError) as excinfo:
        client.import_invoices([CandidateInvoice(invoice_number="INV-1")])
    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectionError)


def test_timeout_becomes_network_error(client, http_session):
    http_session.request.side_effect = requests.exceptions.Timeout("slow")
    with pytest.raises(NetworkError):
        client.list_invoices()


@pytest.mark.parametrize("status", [400, 401, 404, 500, 503])
def test_error_status_becomes_network_error(client, http_session, make_response, status):
    http_session.request.return_value = make_response(status_code=status, json_body={"status": "error"})
    with pytest.raises(NetworkError) as excinfo:
        client.import_invoices([CandidateInvoice(invoice_number="INV-1")])
    assert excinfo.value.status_code == status


def test_non_json_body_is_contract_error(client, http_session, make_response):
    http_session.request.return_value = make_response(json_body=None)
    with pytest.raises(ResponseContractError):
        client.import_invoices([CandidateInvoice(invoice_number="INV-1")])


def test_enveloped_import_body_is_contract_error(client, http_session, make_response, outcome_body):
    http_session.request.return_value = make_response(json_body={"status": "success", "data": outcome_body()})
    with pytest.raises(ResponseContractError):
        client.import_invoices([CandidateInvoice(invoice_number="INV-1")])


def test_download_template_writes_bytes(client, http_session, make_response, tmp_path: Path):
    http_session.request.return_value = make_response(content=b"PK\x03\x04workbook")
    dest = client.download_template(tmp_path / "out" / "template.xlsx")
    assert dest.read_bytes() == b"PK\x03\x04workbook"
    assert http_session.request.call_args.args == ("GET", "http://exportpro.test/api/invoices/import/template")


def test_download_template_empty_body(client, http_session, make_response, tmp_path: Path):
    http_session.request.return_value = make_response(content=b"")
    with pytest.raises(ResponseContractError):
        client.download_template(tmp_path / "template.xlsx")
    assert not (tmp_path / "template.xlsx").exists()


def test_list_invoices(client, http_session, make_response):
    http_session.request.return_value = make_response(
        json_body={"status": "success", "data": [{"id": 1, "invoiceNumber": "INV-1"}, {"id": 2, "invoice_number": "INV-2"}]}
    )
    invoices = client.list_invoices()
    assert [i.invoice_number for i in invoices] == ["INV-1", "INV-2"]
    assert http_session.request.call_args.args == ("GET", "http://exportpro.test/api/invoices")


@pytest.mark.parametrize("body", [[], {"status": "success"}, {"data": {"id": 1}}])
def test_list_invoices_contract(client, http_session, make_response, body):
    http_session.request.return_value = make_response(json_body=body)
    with pytest.raises(ResponseContractError):
        client.list_invoices()


def test_token_sets_authorization_header(http_session):
    ExportProClient("http://x/api", token="s3cret", session=http_session)
    assert http_session.headers["Authorization"] == "Bearer s3cret"
    assert http_session.headers["Accept"] == "application/json"


def test_no_token_no_authorization_header(http_session):
    ExportProClient("http://x/api", session=http_session)
    assert "Authorization" not in http_session.headers


def test_from_config(http_session):
    client = ExportProClient.from_config(
        ApiConfig(base_url="http://cfg/api", timeout_seconds=7.5, token="t"), session=http_session
    )
    assert client.base_url == "http://cfg/api"
    assert client.timeout == 7.5
    assert http_session.headers["Authorization"] == "Bearer t"


def test_metrics_callback_on_success_and_failure(http_session, make_response, outcome_body):
    seen: list[RequestMetrics] = []
    client = ExportProClient("http://x/api", session=http_session, metrics_callback=seen.append)

    http_session.request.return_value = make_response(json_body=outcome_body())
    client.import_invoices([CandidateInvoice(invoice_number="INV-1")])
    http_session.request.side_effect = requests.exceptions.ConnectionError("down")
    with pytest.raises(NetworkError):
        client.list_invoices()

    assert [(m.method, m.path, m.status_code) for m in seen] == [
        ("POST", "/invoices/import", 200),
        ("GET", "/invoices", None),
    ]
    assert all(m.elapsed_seconds >= 0 for m in seen)
