import base64

from fastapi.testclient import TestClient
from record_normalizer.main import app

client = TestClient(app)

HEADER = "Timestamp,Address,ZIP,FullName,FooDuration,BarDuration,TotalDuration,Notes"
ROW = "3/12/14 12:00:00 AM,Somewhere,1,Superman übertan,1:00:00.000,0:00:30.500,x,Notes"


def _post(raw, name="test.csv", params=None):
    files = {"file": (name, raw, "text/csv")}
    return client.post("/normalize", files=files, params=params)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_rejects_non_csv_upload():
    r = _post(b"a,b", name="notes.txt")
    assert r.status_code == 422


def test_normalize_with_header():
    raw = f"{HEADER}\r\n{ROW}\r\nbroken,line\r\n".encode("utf-8")
    r = _post(raw)
    assert r.status_code == 200

    data = r.json()
    assert data["normalized_csv"]["encoding"] == "utf-8"

    out_text = base64.b64decode(data["normalized_csv"]["content_b64"]).decode("utf-8")
    lines = out_text.splitlines()
    assert lines[0] == HEADER
    assert lines[1] == "2014-03-12T03:00:00-04:00,Somewhere,00001,SUPERMAN ÜBERTAN,3600,30,3630,Notes"
    assert len(lines) == 2

    report = data["report"]
    assert report["summary"]["header_detected"] is True
    assert report["summary"]["rows_in"] == 3
    assert report["summary"]["rows_out"] == 1
    assert report["summary"]["errors"] == 1
    assert report["errors"][0]["issue"] == "malformed_record"
    assert report["errors"][0]["row"] == 3
    assert report["normalizations"]["field_order"]["ZIP"] == 2
    assert report["normalizations"]["encoding"]["newlines_changed"] is True


def test_latin1_input_is_decoded():
    row = "3/12/14 12:00:00 AM,1,Paul,Montr\u00e9al,,,,caf\u00e9 du march\u00e9"
    raw = "\n".join([row] * 20).encode("latin-1")
    r = _post(raw)
    assert r.status_code == 200

    data = r.json()
    out_text = base64.b64decode(data["normalized_csv"]["content_b64"]).decode("utf-8")
    assert out_text.splitlines()[0] == (
        "2014-03-12T03:00:00-04:00,00001,PAUL,Montr\u00e9al,0,0,0,caf\u00e9 du march\u00e9"
    )
    assert data["report"]["warnings"] == []


def test_undecodable_input_is_reported_as_warning(monkeypatch):
    class _NoMatch:
        def best(self):
            return None

    monkeypatch.setattr("record_normalizer.normalize.from_bytes", lambda raw: _NoMatch())
    raw = b"3/12/14 12:00:00 AM,1,Paul,Montr\xe9al,,,,note\n"
    r = _post(raw)
    assert r.status_code == 200

    report = r.json()["report"]
    assert report["summary"]["warnings"] == 1
    assert report["warnings"][0]["issue"] == "decode_fallback"
    out_text = base64.b64decode(r.json()["normalized_csv"]["content_b64"]).decode("utf-8")
    assert out_text == "2014-03-12T03:00:00-04:00,00001,PAUL,Montr\ufffdal,0,0,0,note\n"


def test_error_budget_exhausted_returns_422():
    raw = "\n".join(["bad"] * 3 + [ROW]).encode("utf-8")
    r = _post(raw, params={"max_errors": 2})
    assert r.status_code == 422

    detail = r.json()["detail"]
    assert detail["max_errors"] == 2
    assert detail["line"] == 2
    assert [e["issue"] for e in detail["errors"]] == ["malformed_record", "malformed_record"]
