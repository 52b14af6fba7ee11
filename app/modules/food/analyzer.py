"""
Food image analysis through a hosted multimodal model.

The image and a prompt listing the user's restrictions go to OpenRouter's
OpenAI-compatible chat completions endpoint. The model is asked for a JSON
object; whatever it returns is parsed leniently, and the detected
ingredients are then run through the restriction matcher so a known
conflict always produces an unsafe verdict.
"""

import base64
import json
import logging
import re
from typing import List, Optional

from openai import OpenAI, OpenAIError

from app.config.settings import settings
from app.core.llm_client import get_llm
from app.modules.food.restrictions import describe_restriction, match_profile
from app.modules.food.schemas import AnalysisResult

logger = logging.getLogger(__name__)

SAFE_REASON = "This food appears safe based on your dietary restrictions."
CAUTION_REASON = "We couldn't determine whether this food is safe. Check the ingredients carefully."

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class FoodAnalysisError(Exception):
    """The model could not be reached or refused the request."""


def fallback_result(reason: str = "Could not properly analyze the image") -> AnalysisResult:
    result = AnalysisResult(
        food_name="Unknown food",
        ingredients=[],
        is_safe=False,
        unsafe_reasons=[reason],
        description="The AI could not properly analyze this image. Please try again with a clearer photo.",
    )
    result.safety_reason = reason
    return result


def create_analysis_prompt(active_restrictions: List[str]) -> str:
    if active_restrictions:
        described = ", ".join(
            f'"{tag}" (must avoid {describe_restriction(tag)})' for tag in active_restrictions
        )
        restrictions_text = f"The user has the following dietary restrictions: {described}."
    else:
        restrictions_text = "The user has no specific dietary restrictions."

    return f"""
Analyze this food image and provide the following information:
1. What food item(s) are in the image?
2. List all identifiable ingredients.
3. {restrictions_text}
4. Is this food safe for the user to eat based on their restrictions?
5. If not safe, explain specifically which ingredients conflict with which restrictions.

Format your response as JSON with the following structure:
{{
  "foodName": "Name of the food",
  "ingredients": ["ingredient1", "ingredient2", ...],
  "isSafe": true/false,
  "unsafeReasons": ["reason1", "reason2", ...],
  "description": "Brief explanation of the analysis"
}}
""".strip()


def parse_analysis_response(text: Optional[str]) -> AnalysisResult:
    """Parse the model reply; JSON first, then the first {...} block, else the fallback."""
    payload = None
    if text:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            match = _JSON_BLOCK.search(text)
            if match:
                try:
                    payload = json.loads(match.group(0))
                except json.JSONDecodeError:
                    payload = None
    if not isinstance(payload, dict):
        logger.warning("Model reply was not a JSON object, using fallback analysis")
        return fallback_result()
    try:
        return AnalysisResult.model_validate(payload)
    except (ValueError, TypeError) as e:
        logger.warning(f"Model reply did not match the analysis shape: {e}")
        return fallback_result("Error processing analysis")


def cross_reference(result: AnalysisResult, profile) -> AnalysisResult:
    """Force an unsafe verdict when the matcher finds a known conflict."""
    if profile is None:
        return result
    match = match_profile(result.food_name, result.ingredients, profile)
    if match.safe:
        return result
    reasons = list(result.unsafe_reasons)
    for conflict in match.conflicts:
        if conflict.message not in reasons:
            reasons.append(conflict.message)
    # The model's own safety text no longer matches the forced verdict
    return result.model_copy(update={"is_safe": False, "unsafe_reasons": reasons, "safety_reason": None})


def format_safety_reason(result: AnalysisResult) -> str:
    if result.is_safe is True:
        return SAFE_REASON
    if result.is_safe is None:
        return CAUTION_REASON
    reasons = ". ".join(r.rstrip(". ") for r in result.unsafe_reasons if r)
    if reasons:
        return f"This food may not be safe: {reasons}. {result.description}"
    return f"This food may not be safe. {result.description}"


class FoodAnalyzer:
    def __init__(self, client: OpenAI, default_model: Optional[str] = None, max_tokens: Optional[int] = None):
        self.client = client
        self.default_model = default_model or settings.default_ai_model
        self.max_tokens = max_tokens or settings.analysis_max_tokens

    def analyze(
        self,
        image_bytes: bytes,
        profile,
        model: Optional[str] = None,
        content_type: str = "image/jpeg",
    ) -> AnalysisResult:
        """Classify the food in an image and judge it against the profile"""
        if not image_bytes:
            raise FoodAnalysisError("No image data provided")
        active = list(profile.active_restrictions) if profile is not None else []
        prompt = create_analysis_prompt(active)
        reply = self._call_model(image_bytes, prompt, model or self.default_model, content_type)
        result = cross_reference(parse_analysis_response(reply), profile)
        if result.safety_reason is None:
            result.safety_reason = format_safety_reason(result)
        return result

    def _call_model(self, image_bytes: bytes, prompt: str, model: str, content_type: str) -> str:
        encoded = base64.b64encode(image_bytes).decode("ascii")
        try:
            completion = self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:{content_type};base64,{encoded}"},
                            },
                        ],
                    }
                ],
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            logger.error(f"OpenRouter request failed for model {model}: {e}")
            raise FoodAnalysisError(f"Failed to analyze the image: {e}") from e

        if not completion.choices:
            logger.warning(f"OpenRouter returned no choices for model {model}")
            return ""
        return completion.choices[0].message.content or ""


def get_food_analyzer() -> FoodAnalyzer:
    return FoodAnalyzer(get_llm())
