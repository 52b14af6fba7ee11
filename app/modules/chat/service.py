from openai import OpenAI, OpenAIError
from supabase import Client
from app.config.settings import settings
from app.modules.chat.schemas import ChatMessage
from app.modules.dietary_profiles.service import DietaryProfileService
from app.modules.scans.service import ScanService
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

NO_ANSWER = "I'm sorry, I couldn't process your question."

CHAT_MAX_TOKENS = 800


def _tags(values: List[str]) -> str:
    return ", ".join(values) if values else "none"


def build_system_prompt(profile, recent_scans) -> str:
    lines = [
        "You are a friendly nutrition assistant for the \"Can I Eat This?\" app.",
        "Answer questions about food safety, ingredients and substitutions, taking the",
        "user's dietary restrictions into account. Keep answers short and practical and",
        "recommend checking labels or asking a doctor when in doubt.",
        "",
    ]
    if profile is not None:
        lines += [
            "User's dietary profile:",
            f"- Allergies: {_tags(profile.allergies)}",
            f"- Dietary preferences: {_tags(profile.dietary_preferences)}",
            f"- Health restrictions: {_tags(profile.health_restrictions)}",
        ]
    else:
        lines.append("The user has not set up a dietary profile yet.")

    if recent_scans:
        lines += ["", "Recently scanned foods:"]
        for scan in recent_scans:
            if scan.is_safe is True:
                verdict = "safe"
            elif scan.is_safe is False:
                verdict = "unsafe"
            else:
                verdict = "caution"
            lines.append(f"- {scan.food_name} ({verdict}): {', '.join(scan.ingredients) or 'no ingredients detected'}")
    return "\n".join(lines)


class ChatService:
    def __init__(self, supabase: Client, llm: OpenAI):
        self.supabase = supabase
        self.llm = llm

    def answer(
        self,
        user_id: str,
        query: str,
        history: List[ChatMessage],
        model: Optional[str] = None
    ) -> str:
        """Ask the model a question with the user's profile and recent scans as context"""
        profile = DietaryProfileService(self.supabase).get_profile(user_id)
        recent = ScanService(self.supabase).list_scans(user_id, limit=settings.recent_scans_limit)

        messages = [{"role": "system", "content": build_system_prompt(profile, recent)}]
        trimmed = history[-settings.chat_history_limit:] if settings.chat_history_limit > 0 else []
        messages += [{"role": m.role, "content": m.content} for m in trimmed]
        messages.append({"role": "user", "content": query})

        try:
            completion = self.llm.chat.completions.create(
                model=model or settings.default_ai_model,
                messages=messages,
                max_tokens=CHAT_MAX_TOKENS,
            )
        except OpenAIError as e:
            logger.error(f"Chat completion failed for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to get a response from the assistant")

        if not completion.choices:
            return NO_ANSWER
        return (completion.choices[0].message.content or "").strip() or NO_ANSWER
