"""Component analyzer backed by a text model."""

from pydantic import ValidationError as PydanticValidationError

from ..core.errors import MalformedResultError
from ..core.json import JSONParseError, extract_json
from ..core.logging_config import get_logger
from .llm import invoke_text
from .models import ComponentAnalysis, TextModel
from .prompts import ANALYZER_PROMPT

logger = get_logger(__name__)


class ComponentAnalyzer:
    """Breaks a request into required, custom and composite primitives."""

    def __init__(self, llm: TextModel) -> None:
        self.llm = llm

    async def analyze(self, request: str, available_kinds: list[str]) -> ComponentAnalysis:
        """
        Raises:
            TransportError: Model call failed
            MalformedResultError: Response is not an analysis object
        """
        prompt = ANALYZER_PROMPT.format(request=request, available=", ".join(available_kinds))
        text = await invoke_text(self.llm, prompt, "analyzer")

        try:
            data = extract_json(text)
        except JSONParseError as e:
            raise MalformedResultError(f"Analysis is not JSON: {e}", text, e) from e
        if not isinstance(data, dict):
            raise MalformedResultError("Analysis must be a JSON object", text)

        try:
            analysis = ComponentAnalysis(
                required_primitives=data.get("requiredComponents") or [],
                custom_primitives=data.get("customComponents") or [],
                composite_primitives=data.get("compositeComponents") or [],
                reasoning=data.get("reasoning") or "No reasoning provided.",
            )
        except PydanticValidationError as e:
            raise MalformedResultError(f"Analysis has unexpected shape: {e}", text, e) from e

        logger.info("analysis_complete", required=len(analysis.required_primitives))
        return analysis
