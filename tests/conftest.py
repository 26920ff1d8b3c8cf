"""Pytest fixtures for test suite."""

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from safetybot.config import Settings
from safetybot.chat.providers import LLMProvider
from safetybot.knowledge import KnowledgeGroup, KnowledgeStore, Record, RecordCategory


FORKLIFT_CASE_URL = "https://anzeninfo.mhlw.go.jp/anzen_pg/SAI_DET.aspx?joho_no=100123"
STAIRS_CASE_URL = "https://anzeninfo.mhlw.go.jp/anzen_pg/SAI_DET.aspx?joho_no=100456"
SCAFFOLD_LAW_URL = "https://laws.e-gov.go.jp/law/347M50002000032#Mp-At_518"


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def faq_records() -> list[Record]:
    return [
        Record(
            id="safety_basics-0",
            category=RecordCategory.KNOWLEDGE,
            title="KY活動（危険予知活動）とは何ですか？",
            tags=("KY活動", "危険予知"),
            body="作業前に職場に潜む危険を話し合い、対策を決める活動です。",
            group_id="safety_basics",
            group_name="安全衛生の基本",
        ),
        Record(
            id="safety_basics-1",
            category=RecordCategory.KNOWLEDGE,
            title="高所作業で墜落制止用器具はいつ必要ですか？",
            tags=("墜落制止用器具", "高所作業"),
            body="高さ2メートル以上で作業床を設けることが困難な箇所では使用が必要です。",
            group_id="safety_basics",
            group_name="安全衛生の基本",
        ),
    ]


@pytest.fixture
def case_records() -> list[Record]:
    return [
        Record(
            id="100123",
            category=RecordCategory.CASE,
            title="倉庫内で後退してきたフォークリフトに激突され死亡",
            tags=("フォークリフト", "陸上貨物運送事業"),
            body="歩行者通路と走行通路を区分し、後退時の誘導者配置を徹底する。",
            source_url=FORKLIFT_CASE_URL,
            situation="荷の仕分け作業中、後退してきた車両に背後から激突された。",
            cause="運転者が後方確認を怠った。",
        ),
        Record(
            id="100456",
            category=RecordCategory.CASE,
            title="階段を荷物を持って降りる途中に足を踏み外し転落",
            tags=("階段", "小売業"),
            body="荷物は小分けにして片手を空け、手すりを使用する。",
            source_url=STAIRS_CASE_URL,
            situation="両手で段ボールを抱えて降りていたところ踏み外した。",
            cause="両手がふさがり手すりを使えなかった。",
        ),
    ]


@pytest.fixture
def law_records() -> list[Record]:
    return [
        Record(
            id="kisoku-518",
            category=RecordCategory.LAW,
            title="作業床の設置等",
            tags=("墜落", "作業床"),
            body=(
                "事業者は、高さが二メートル以上の箇所で作業を行なう場合には作業床を設けなければならない。"
                "前項の規定により作業床を設けることが困難なときは、防網を張る等の措置を講じなければならない。"
            ),
            source_url=SCAFFOLD_LAW_URL,
            law_name="労働安全衛生規則",
            article_number="第518条",
            chapter="第九章 墜落、飛来崩壊等による危険の防止",
        ),
        Record(
            id="kisoku-151-7",
            category=RecordCategory.LAW,
            title="接触の防止",
            tags=("フォークリフト", "車両系荷役運搬機械"),
            body="事業者は、車両系荷役運搬機械等の運転中に接触の危険がある箇所に労働者を立ち入らせてはならない。",
            law_name="労働安全衛生規則",
            article_number="第151条の7",
        ),
    ]


@pytest.fixture
def sample_store(faq_records, case_records, law_records) -> KnowledgeStore:
    """In-memory store (not backed by a file)."""
    return KnowledgeStore(
        groups=[KnowledgeGroup(id="safety_basics", name="安全衛生の基本", items=faq_records)],
        cases=case_records,
        laws=law_records,
        metadata={"last_updated": "2025-01-15"},
    )


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def knowledge_document() -> dict:
    return {
        "version": "1.0",
        "generated": "2025-01-15T00:00:00.000Z",
        "count": 2,
        "categories": [
            {
                "id": "safety_basics",
                "name": "安全衛生の基本",
                "items": [
                    {
                        "question": "KY活動とは何ですか？",
                        "answer": "作業前に危険を話し合う活動です。",
                        "keywords": ["KY活動", "危険予知"],
                    },
                ],
            },
            {
                "id": "protective_equipment",
                "name": "保護具",
                "items": [
                    {
                        "question": "保護帽の交換時期は？",
                        "answer": "FRP製は5年が目安です。",
                        "keywords": ["保護帽", "ヘルメット"],
                    },
                ],
            },
        ],
        "metadata": {"last_updated": "2025-01-15"},
    }


@pytest.fixture
def data_dir(tmp_path: Path, knowledge_document: dict) -> Path:
    """Directory with knowledge.json, jirei.json and laws.json."""
    (tmp_path / "knowledge.json").write_text(
        json.dumps(knowledge_document, ensure_ascii=False), encoding="utf-8"
    )
    (tmp_path / "jirei.json").write_text(
        json.dumps(
            {
                "version": "1.0",
                "totalCases": 1,
                "cases": [
                    {
                        "id": "100123",
                        "url": FORKLIFT_CASE_URL,
                        "title": "倉庫内で後退してきたフォークリフトに激突され死亡",
                        "situation": "荷の仕分け作業中に激突された。",
                        "cause": "後方確認を怠った。",
                        "measure": "歩行者通路と走行通路を区分する。",
                        "industry": "陸上貨物運送事業",
                        "equipment": "フォークリフト",
                        "type": "激突され",
                        "categorization": "",
                    }
                ],
            },
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    (tmp_path / "laws.json").write_text(
        json.dumps(
            [
                {
                    "law": "労働安全衛生規則",
                    "articleNumber": "第518条",
                    "chapter": "第九章",
                    "title": "作業床の設置等",
                    "content": "事業者は、高さが二メートル以上の箇所では作業床を設けなければならない。",
                    "tags": ["墜落", "作業床"],
                    "url": SCAFFOLD_LAW_URL,
                }
            ],
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    return tmp_path


# =============================================================================
# LLM Fixtures
# =============================================================================


class FakeProvider(LLMProvider):
    """Records calls and returns a canned reply (or raises ``error``)."""

    name = "fake"

    def __init__(self, reply: str = "安全第一で作業してください。", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    def complete(self, system_prompt, history, user_message, *, model, max_tokens, temperature):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "history": list(history),
                "user_message": user_message,
                "model": model,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_provider():
    """Factory for fake providers, e.g. ``make_provider(error=UpstreamTimeoutError())``."""
    return FakeProvider


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        ai_provider="openai",
        openai_api_key="test-key",
        google_api_key=None,
        anthropic_api_key=None,
        basic_auth_user=None,
        basic_auth_password=None,
        knowledge_path=str(data_dir / "knowledge.json"),
        cases_path=str(data_dir / "jirei.json"),
        laws_path=str(data_dir / "laws.json"),
    )


@pytest.fixture
def client(settings: Settings, fake_provider: FakeProvider):
    """Test client over the files in ``data_dir`` with a fake LLM."""
    from safetybot.main import create_app

    app = create_app(settings=settings, provider=fake_provider)
    with TestClient(app) as test_client:
        yield test_client
