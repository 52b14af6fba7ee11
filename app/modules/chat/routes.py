from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from openai import OpenAI
from app.core.llm_client import get_llm
from app.database.supabase_client import get_supabase
from app.modules.chat.schemas import ChatRequest, ChatResponse
from app.modules.chat.service import ChatService
from app.modules.users.schemas import UserResponse
from app.core.dependencies import get_current_app_user
from supabase import Client

router = APIRouter(prefix="/chat", tags=["chat"])


def get_chat_service(
    supabase: Client = Depends(get_supabase),
    llm: OpenAI = Depends(get_llm)
) -> ChatService:
    return ChatService(supabase, llm)


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    current_user: UserResponse = Depends(get_current_app_user),
    service: ChatService = Depends(get_chat_service)
):
    """Answer a food question in the context of the caller's profile and recent scans"""
    answer = await run_in_threadpool(
        service.answer, current_user.id, request.query, request.history, model=current_user.ai_model
    )
    return ChatResponse(answer=answer)
