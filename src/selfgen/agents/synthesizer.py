"""Component code synthesizer backed by a text model."""

from ..core.logging_config import get_logger
from ..tree import KNOWN_KINDS
from .llm import invoke_text
from .models import ComponentAnalysis, TextModel
from .prompts import SYNTHESIZER_PROMPT

logger = get_logger(__name__)


class CodeSynthesizer:
    """
    Produces raw component JSON for a request.

    The text is returned unparsed; assembly decides what to do with it.
    """

    def __init__(self, llm: TextModel) -> None:
        self.llm = llm

    async def synthesize(self, request: str, analysis: ComponentAnalysis, available: list[str]) -> str:
        prompt = SYNTHESIZER_PROMPT.format(
            request=request,
            analysis=analysis.model_dump_json(),
            available=", ".join(available),
            kinds=", ".join(sorted(KNOWN_KINDS)),
        )
        text = await invoke_text(self.llm, prompt, "synthesizer")
        logger.info("synthesis_complete", length=len(text))
        return text
