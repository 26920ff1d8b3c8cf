"""Tests for the knowledge file loaders and the in-memory store."""

import json
import logging
import threading
from datetime import date
from pathlib import Path

import pytest

from safetybot.knowledge import (
    KnowledgeStore,
    RecordCategory,
    StoreLoadError,
    StorePersistError,
    UnknownGroupError,
    load_cases,
    load_knowledge_document,
    load_laws,
)


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


# =============================================================================
# Loaders
# =============================================================================


class TestLoadKnowledgeDocument:
    def test_groups_and_items(self, data_dir):
        document = load_knowledge_document(data_dir / "knowledge.json")

        assert [g.id for g in document.groups] == ["safety_basics", "protective_equipment"]
        item = document.groups[0].items[0]
        assert item.id == "safety_basics-0"
        assert item.category is RecordCategory.KNOWLEDGE
        assert item.title == "KY活動とは何ですか？"
        assert item.tags == ("KY活動", "危険予知")
        assert item.group_name == "安全衛生の基本"
        assert document.metadata == {"last_updated": "2025-01-15"}

    def test_keywords_as_string(self, tmp_path):
        path = write_json(
            tmp_path / "k.json",
            {"categories": [{"id": "g", "name": "G", "items": [{"question": "Q", "answer": "A", "keywords": "足場"}]}]},
        )
        assert load_knowledge_document(path).groups[0].items[0].tags == ("足場",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(StoreLoadError):
            load_knowledge_document(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "k.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreLoadError):
            load_knowledge_document(path)

    def test_byte_order_mark(self, tmp_path, knowledge_document):
        path = tmp_path / "k.json"
        path.write_text("\ufeff" + json.dumps(knowledge_document, ensure_ascii=False), encoding="utf-8")
        assert len(load_knowledge_document(path).groups) == 2


class TestLoadCases:
    def test_envelope(self, data_dir):
        cases = load_cases(data_dir / "jirei.json")

        assert len(cases) == 1
        case = cases[0]
        assert case.id == "100123"
        assert case.category is RecordCategory.CASE
        assert case.body == "歩行者通路と走行通路を区分する。"
        assert case.situation == "荷の仕分け作業中に激突された。"
        assert case.cause == "後方確認を怠った。"

    def test_classification_columns_become_tags(self, data_dir):
        case = load_cases(data_dir / "jirei.json")[0]
        assert case.tags == ("陸上貨物運送事業", "フォークリフト", "激突され")

    def test_url_is_verbatim(self, tmp_path):
        url = "https://anzeninfo.mhlw.go.jp/anzen_pg/SAI_DET.aspx?joho_no=000777&x=1"
        path = write_json(tmp_path / "c.json", [{"id": "000777", "title": "t", "measure": "m", "url": url}])
        assert load_cases(path)[0].source_url == url

    def test_url_surrounding_whitespace_is_stripped(self, tmp_path):
        url = "https://anzeninfo.mhlw.go.jp/anzen_pg/SAI_DET.aspx?Joho_No=000777&x=%20a#Top"
        path = write_json(
            tmp_path / "c.json",
            [
                {"id": "1", "title": "t", "measure": "m", "url": f"  {url}\n"},
                {"id": "2", "title": "t", "measure": "m", "url": " \t "},
            ],
        )
        cases = load_cases(path)

        assert cases[0].source_url == url
        assert cases[1].source_url is None

    def test_flat_array_without_url(self, tmp_path):
        path = write_json(tmp_path / "c.json", [{"id": "1", "title": "t", "measure": "m"}])
        assert load_cases(path)[0].source_url is None

    def test_wrong_shape(self, tmp_path):
        path = write_json(tmp_path / "c.json", {"items": []})
        with pytest.raises(StoreLoadError):
            load_cases(path)


class TestLoadLaws:
    def test_flat_array(self, data_dir):
        law = load_laws(data_dir / "laws.json")[0]

        assert law.id == "労働安全衛生規則-第518条"
        assert law.category is RecordCategory.LAW
        assert law.law_name == "労働安全衛生規則"
        assert law.article_number == "第518条"
        assert law.tags == ("墜落", "作業床")
        assert law.source_url == "https://laws.e-gov.go.jp/law/347M50002000032#Mp-At_518"

    def test_envelope_without_url(self, tmp_path):
        path = write_json(
            tmp_path / "l.json",
            {"laws": [{"law": "労働安全衛生法", "articleNumber": "第20条", "title": "事業者の講ずべき措置等", "content": "…"}]},
        )
        law = load_laws(path)[0]
        assert law.source_url is None
        assert law.id == "労働安全衛生法-第20条"
        assert law.tags == ()

    def test_url_surrounding_whitespace_is_stripped(self, tmp_path):
        url = "https://laws.e-gov.go.jp/law/347M50002000032#Mp-At_518"
        path = write_json(
            tmp_path / "l.json",
            [{"law": "労働安全衛生規則", "articleNumber": "第518条", "title": "t", "content": "c", "url": f"\t{url}  "}],
        )
        assert load_laws(path)[0].source_url == url


# =============================================================================
# Store
# =============================================================================


class TestKnowledgeStoreLoad:
    def test_load_all_files(self, data_dir):
        store = KnowledgeStore.load(
            data_dir / "knowledge.json", data_dir / "jirei.json", data_dir / "laws.json"
        )

        assert store.counts() == {
            RecordCategory.KNOWLEDGE: 2,
            RecordCategory.CASE: 1,
            RecordCategory.LAW: 1,
        }
        assert len(store) == 4

    def test_record_order(self, data_dir):
        store = KnowledgeStore.load(
            data_dir / "knowledge.json", data_dir / "jirei.json", data_dir / "laws.json"
        )
        assert [r.category for r in store.records()] == [
            RecordCategory.KNOWLEDGE,
            RecordCategory.KNOWLEDGE,
            RecordCategory.CASE,
            RecordCategory.LAW,
        ]

    def test_missing_files_give_empty_store(self, tmp_path):
        store = KnowledgeStore.load(tmp_path / "k.json", tmp_path / "c.json", tmp_path / "l.json")
        assert len(store) == 0
        assert list(store.records()) == []

    def test_one_bad_file_keeps_the_others(self, data_dir, caplog):
        (data_dir / "jirei.json").write_text("[{", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            store = KnowledgeStore.load(
                data_dir / "knowledge.json", data_dir / "jirei.json", data_dir / "laws.json"
            )

        assert len(store.cases) == 0
        assert len(store.knowledge_items) == 2
        assert len(store.laws) == 1
        assert "Case reports unavailable" in caplog.text

    def test_to_document_round_trips_shape(self, data_dir, knowledge_document):
        store = KnowledgeStore.load(data_dir / "knowledge.json")
        document = store.to_document()

        assert document["count"] == 2
        assert document["categories"] == knowledge_document["categories"]
        assert document["metadata"] == knowledge_document["metadata"]


class TestAddKnowledgeItem:
    @pytest.fixture
    def store(self, data_dir) -> KnowledgeStore:
        return KnowledgeStore.load(data_dir / "knowledge.json")

    def test_appends_and_persists(self, store, data_dir):
        record = store.add_knowledge_item(
            "safety_basics",
            "指差し呼称の効果は？",
            "意識レベルを上げ、確認ミスを減らします。",
            ["指差し呼称"],
            today=date(2025, 3, 1),
        )

        assert record.id == "safety_basics-1"
        assert record.category is RecordCategory.KNOWLEDGE
        assert len(store.get_group("safety_basics").items) == 2
        assert store.metadata["last_updated"] == "2025-03-01"

        on_disk = json.loads((data_dir / "knowledge.json").read_text(encoding="utf-8"))
        items = on_disk["categories"][0]["items"]
        assert items[-1] == {
            "question": "指差し呼称の効果は？",
            "answer": "意識レベルを上げ、確認ミスを減らします。",
            "keywords": ["指差し呼称"],
        }
        assert on_disk["count"] == 3
        assert on_disk["metadata"]["last_updated"] == "2025-03-01"

    def test_added_item_is_searchable_after_reload(self, store, data_dir):
        store.add_knowledge_item("protective_equipment", "耳栓の選び方", "遮音値で選びます。", ["耳栓"])

        reloaded = KnowledgeStore.load(data_dir / "knowledge.json")
        assert "耳栓の選び方" in [r.title for r in reloaded.records()]

    def test_unknown_group(self, store, data_dir):
        before = (data_dir / "knowledge.json").read_text(encoding="utf-8")

        with pytest.raises(UnknownGroupError):
            store.add_knowledge_item("no_such_group", "Q", "A", ["k"])

        assert (data_dir / "knowledge.json").read_text(encoding="utf-8") == before
        assert len(store.knowledge_items) == 2

    def test_failed_write_leaves_store_unchanged(self, tmp_path, faq_records):
        from safetybot.knowledge import KnowledgeGroup

        # A directory in place of the file makes the final rename fail
        target = tmp_path / "knowledge.json"
        target.mkdir()
        store = KnowledgeStore(
            groups=[KnowledgeGroup(id="safety_basics", name="基本", items=faq_records)],
            metadata={"last_updated": "2025-01-15"},
            knowledge_path=target,
        )

        with pytest.raises(StorePersistError):
            store.add_knowledge_item("safety_basics", "Q", "A", ["k"])

        assert len(store.knowledge_items) == 2
        assert store.metadata == {"last_updated": "2025-01-15"}
        assert [p.name for p in tmp_path.iterdir()] == ["knowledge.json"]

    def test_in_memory_store_is_not_persisted(self, sample_store):
        sample_store.add_knowledge_item("safety_basics", "Q", "A", ["k"])
        assert len(sample_store.knowledge_items) == 3

    def test_concurrent_adds_are_serialized(self, store, data_dir):
        def add(i: int) -> None:
            store.add_knowledge_item("safety_basics", f"質問{i}", f"回答{i}", [f"kw{i}"])

        threads = [threading.Thread(target=add, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        on_disk = json.loads((data_dir / "knowledge.json").read_text(encoding="utf-8"))
        items = on_disk["categories"][0]["items"]
        assert len(items) == 21
        assert len(store.get_group("safety_basics").items) == 21
        assert {item["question"] for item in items[1:]} == {f"質問{i}" for i in range(20)}
