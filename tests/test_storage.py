import json
from datetime import datetime, timezone

from site_harvest.crawler.models import PageRecord
from site_harvest.storage import BlobStore, DatasetStore, KeyValueStore, RowStore
from site_harvest.utils import blob_key

RECORD = PageRecord(
    title="Title",
    url="https://ex.com/a?x=1",
    sitemap="https://ex.com/sitemap.xml",
    meta_description="Desc",
    snippet="Snippet",
)


def test_stores_satisfy_protocols(tmp_path):
    assert isinstance(DatasetStore(tmp_path), RowStore)
    assert isinstance(KeyValueStore(tmp_path), BlobStore)


def test_dataset_appends_json_lines(tmp_path):
    store = DatasetStore(tmp_path)
    store.append(RECORD)
    store.append(RECORD)
    lines = store.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0]) == {
        "title": "Title",
        "url": "https://ex.com/a?x=1",
        "sitemap": "https://ex.com/sitemap.xml",
        "meta_description": "Desc",
        "snippet": "Snippet",
    }
    assert store.path == tmp_path / "datasets" / "default.jsonl"
    assert len(store.read_all()) == 2


def test_dataset_empty(tmp_path):
    assert DatasetStore(tmp_path).read_all() == []


def test_key_value_put_get_overwrite(tmp_path):
    store = KeyValueStore(tmp_path)
    key = blob_key(RECORD.url)
    store.put(key, {"v": 1})
    store.put(key, {"v": 2})
    assert store.get(key) == {"v": 2}
    assert store.keys() == [key]
    assert store.get("pages/unknown") is None


def test_key_value_keys_with_slashes_stay_flat(tmp_path):
    store = KeyValueStore(tmp_path)
    store.put("pages/a", [1])
    store.put("pages/b", [2])
    files = sorted(p.name for p in (tmp_path / "key_value_stores" / "default").iterdir())
    assert files == ["pages%2Fa.json", "pages%2Fb.json"]
    assert store.keys() == ["pages/a", "pages/b"]


def test_full_document_shape():
    ts = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    doc = RECORD.as_document(ts)
    assert doc == {
        "url": RECORD.url,
        "sitemap": RECORD.sitemap,
        "title": "Title",
        "meta_description": "Desc",
        "snippet": "Snippet",
        "timestamp": "2024-05-01T12:00:00+00:00",
    }
    assert "timestamp" in RECORD.as_document()
