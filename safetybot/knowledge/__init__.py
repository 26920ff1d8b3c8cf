"""Knowledge domain - records, JSON loaders and the in-memory store."""

from .models import KnowledgeGroup, Record, RecordCategory, faq_item_to_dict
from .loader import (
    KnowledgeDocument,
    StoreLoadError,
    case_record,
    faq_record,
    law_record,
    load_cases,
    load_knowledge_document,
    load_laws,
    parse_knowledge_document,
)
from .store import KnowledgeStore, StorePersistError, UnknownGroupError
from .schemas import KnowledgeItemAdded, KnowledgeItemCreate, KnowledgeItemRead
from .router import router

__all__ = [
    # Router
    "router",
    # Models
    "KnowledgeGroup",
    "Record",
    "RecordCategory",
    "faq_item_to_dict",
    # Loading
    "KnowledgeDocument",
    "StoreLoadError",
    "case_record",
    "faq_record",
    "law_record",
    "load_cases",
    "load_knowledge_document",
    "load_laws",
    "parse_knowledge_document",
    # Store
    "KnowledgeStore",
    "StorePersistError",
    "UnknownGroupError",
    # Schemas
    "KnowledgeItemAdded",
    "KnowledgeItemCreate",
    "KnowledgeItemRead",
]
