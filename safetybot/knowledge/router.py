"""Routes for listing and extending the FAQ knowledge base."""

from fastapi import APIRouter, Depends, HTTPException, status

from safetybot.dependencies import get_store

from .schemas import KnowledgeItemAdded, KnowledgeItemCreate, KnowledgeItemRead
from .store import KnowledgeStore, StorePersistError, UnknownGroupError

router = APIRouter(prefix="/api/knowledge", tags=["knowledge"])


@router.get("")
def list_knowledge(store: KnowledgeStore = Depends(get_store)) -> dict:
    """Return the FAQ document (groups and their items)."""
    return store.to_document()


@router.post("", response_model=KnowledgeItemAdded)
def add_knowledge(
    request: KnowledgeItemCreate,
    store: KnowledgeStore = Depends(get_store),
) -> KnowledgeItemAdded:
    """Append an FAQ item and persist the knowledge file."""
    try:
        record = store.add_knowledge_item(
            request.category_id,
            request.question,
            request.answer,
            request.keywords,
        )
    except UnknownGroupError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"カテゴリーが見つかりません: {request.category_id}",
        )
    except StorePersistError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="ナレッジの保存に失敗しました",
        )

    group = store.get_group(request.category_id)
    return KnowledgeItemAdded(
        message="ナレッジが追加されました",
        category_id=request.category_id,
        item=KnowledgeItemRead(question=record.title, answer=record.body, keywords=list(record.tags)),
        count=len(group.items) if group else 0,
    )
