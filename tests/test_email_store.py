import asyncio
import json

from models.signups import DiscountRecord, EmailStoreDocument, SignupRecord
from utils.email_store import JsonFileEmailStore


def _run(coro):
    return asyncio.run(coro)


def test_initialize_creates_empty_document(tmp_path):
    path = tmp_path / "emails.json"
    store = JsonFileEmailStore(str(path))

    _run(store.initialize())

    assert json.loads(path.read_text(encoding="utf-8")) == {"newsletter": [], "discount": []}


def test_initialize_is_idempotent(tmp_path):
    path = tmp_path / "emails.json"
    store = JsonFileEmailStore(str(path))

    _run(store.initialize())
    first = path.read_bytes()
    _run(store.initialize())

    assert path.read_bytes() == first


def test_initialize_leaves_existing_file_alone(tmp_path):
    path = tmp_path / "emails.json"
    existing = {"newsletter": [{"email": "a@b.co", "timestamp": "2024-01-01T00:00:00.000Z", "source": "newsletter"}], "discount": []}
    path.write_text(json.dumps(existing), encoding="utf-8")

    _run(JsonFileEmailStore(str(path)).initialize())

    assert json.loads(path.read_text(encoding="utf-8")) == existing


def test_initialize_creates_parent_directory(tmp_path):
    path = tmp_path / "data" / "emails.json"

    _run(JsonFileEmailStore(str(path)).initialize())

    assert path.is_file()


def test_read_all_missing_file_fails_open(tmp_path):
    store = JsonFileEmailStore(str(tmp_path / "missing.json"))

    doc = _run(store.read_all())

    assert doc.newsletter == []
    assert doc.discount == []


def test_read_all_corrupt_file_fails_open(tmp_path):
    path = tmp_path / "emails.json"
    path.write_text("{not json", encoding="utf-8")

    doc = _run(JsonFileEmailStore(str(path)).read_all())

    assert doc.to_json_dict() == {"newsletter": [], "discount": []}


def test_read_all_wrong_shape_fails_open(tmp_path):
    path = tmp_path / "emails.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    doc = _run(JsonFileEmailStore(str(path)).read_all())

    assert doc.to_json_dict() == {"newsletter": [], "discount": []}


def test_read_all_fills_in_missing_list(tmp_path):
    path = tmp_path / "emails.json"
    path.write_text(json.dumps({"newsletter": [{"email": "a@b.co", "timestamp": "t", "source": "newsletter"}]}), encoding="utf-8")

    doc = _run(JsonFileEmailStore(str(path)).read_all())

    assert [r["email"] for r in doc.newsletter] == ["a@b.co"]
    assert doc.discount == []


def test_write_all_keeps_field_order_and_extra_keys(tmp_path):
    path = tmp_path / "emails.json"
    store = JsonFileEmailStore(str(path))
    doc = EmailStoreDocument()
    doc.add_newsletter(SignupRecord(email="a@b.co", timestamp="2024-01-01T00:00:00.000Z", source="newsletter", note="imported"))
    doc.add_discount(DiscountRecord(email="c@d.co", timestamp="2024-01-02T00:00:00.000Z", discountCode="SOURDOUGH10"))

    assert _run(store.write_all(doc)) is True

    raw = path.read_text(encoding="utf-8")
    assert raw.index('"newsletter"') < raw.index('"discount"')
    assert raw.startswith('{\n  "newsletter"')
    data = json.loads(raw)
    assert data["newsletter"][0]["note"] == "imported"
    assert list(data["discount"][0]) == ["email", "timestamp", "source", "discountCode"]
    assert data["discount"][0]["source"] == "discount_popup"
    assert [p.name for p in tmp_path.iterdir()] == ["emails.json"]


def test_write_all_reports_failure(tmp_path):
    store = JsonFileEmailStore(str(tmp_path / "no-such-dir" / "emails.json"))

    assert _run(store.write_all(EmailStoreDocument())) is False


def test_signup_record_timestamp_is_iso_utc():
    record = SignupRecord(email="a@b.co")

    assert record.timestamp.endswith("Z")
    assert len(record.timestamp) == len("2024-01-01T00:00:00.000Z")


def test_read_all_passes_records_through_verbatim(tmp_path):
    path = tmp_path / "emails.json"
    stored = {
        "newsletter": [{"email": "a@b.com"}, {"email": "keep@me.com", "timestamp": "2024-01-01T00:00:00.000Z", "source": "newsletter"}],
        "discount": [{"email": "c@d.com", "timestamp": "2024-01-02T00:00:00.000Z", "source": "discount_popup"}, "legacy-entry"],
    }
    path.write_text(json.dumps(stored), encoding="utf-8")

    doc = _run(JsonFileEmailStore(str(path)).read_all())

    assert doc.to_json_dict() == stored


def test_read_all_non_list_section_fails_open(tmp_path):
    path = tmp_path / "emails.json"
    path.write_text(json.dumps({"newsletter": "a@b.com", "discount": []}), encoding="utf-8")

    doc = _run(JsonFileEmailStore(str(path)).read_all())

    assert doc.to_json_dict() == {"newsletter": [], "discount": []}
