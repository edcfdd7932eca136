"""Tests for the JSON file-backed document store."""

import json
import threading

from minhland_ads.docstore import DocumentStore


class TestDocumentStore:
    def test_set_and_get(self):
        store = DocumentStore()
        store.set("ads", "a1", {"name": "An"})
        assert store.get("ads", "a1") == {"name": "An"}
        assert store.get("ads", "missing") is None
        assert store.count("ads") == 1

    def test_returned_documents_are_copies(self):
        store = DocumentStore()
        doc = {"tags": ["x"]}
        store.set("ads", "a1", doc)
        doc["tags"].append("y")
        fetched = store.get("ads", "a1")
        fetched["tags"].append("z")
        assert store.get("ads", "a1") == {"tags": ["x"]}

    def test_delete(self):
        store = DocumentStore()
        store.set("ads", "a1", {})
        assert store.delete("ads", "a1") is True
        assert store.delete("ads", "a1") is False

    def test_persistence(self, tmp_path):
        path = tmp_path / "docs.json"
        store = DocumentStore(path)
        store.set("api_responses", "AD-1_facebook", {"response": {"id": "1"}})
        reloaded = DocumentStore(path)
        assert reloaded.get("api_responses", "AD-1_facebook") == {"response": {"id": "1"}}
        assert not path.with_suffix(".tmp").exists()

    def test_unicode_kept_readable(self, tmp_path):
        path = tmp_path / "docs.json"
        DocumentStore(path).set("ads", "a1", {"name": "Bình"})
        assert "Bình" in path.read_text(encoding="utf-8")

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "docs.json"
        path.write_text("{not json", encoding="utf-8")
        store = DocumentStore(path)
        assert store.collection("ads") == {}

    def test_file_layout(self, tmp_path):
        path = tmp_path / "docs.json"
        DocumentStore(path).set("ads", "a1", {"x": 1})
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"collections": {"ads": {"a1": {"x": 1}}}}

    def test_reads_during_concurrent_writes(self):
        store = DocumentStore()
        stop = threading.Event()

        def writer():
            n = 0
            while not stop.is_set():
                store.set("c", f"k{n}", {"n": n, "tags": ["a", "b"]})
                n += 1

        thread = threading.Thread(target=writer)
        thread.start()
        try:
            for _ in range(2000):
                snapshot = store.collection("c")
                assert store.count("c") >= len(snapshot)
        finally:
            stop.set()
            thread.join()
        assert store.count("c") > 0
