"""Routes for the safety chatbot conversation."""

from fastapi import APIRouter, Depends

from safetybot.dependencies import get_dispatcher, get_formatter, get_search
from safetybot.search.service import KnowledgeSearch

from .context import ContextFormatter
from .dispatcher import PromptDispatcher
from .policy import wants_detail
from .schemas import ChatRequest, ChatResponse

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    search: KnowledgeSearch = Depends(get_search),
    formatter: ContextFormatter = Depends(get_formatter),
    dispatcher: PromptDispatcher = Depends(get_dispatcher),
) -> ChatResponse:
    """Answer a message using the knowledge base as prompt context.

    Provider failures propagate as ``ChatError`` and are rendered by the
    application's exception handler.
    """
    result = search.search(request.message)
    context_text = formatter.format(result, request.message)

    response_length = request.response_length
    if response_length is None:
        response_length = "long" if wants_detail(request.message) else "short"

    reply = dispatcher.dispatch(
        request.message,
        context_text,
        request.conversation_history,
        model=request.model,
        response_length=response_length,
    )

    return ChatResponse(
        reply=reply.text,
        knowledge_used=bool(result),
        knowledge_count=len(result.knowledge),
        case_count=len(result.cases),
        law_count=len(result.laws),
        provider=reply.provider,
        model=reply.model,
    )
