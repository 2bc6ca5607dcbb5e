"""Text model invocation shared by the agents."""

from ..core.errors import TransportError
from ..core.logging_config import get_logger
from .models import TextModel

logger = get_logger(__name__)


async def invoke_text(llm: TextModel, prompt: str, agent: str) -> str:
    """
    Run a prompt and return the response text.

    Raises:
        TransportError: If the model call fails
    """
    try:
        response = await llm.ainvoke(prompt)
    except Exception as e:
        logger.error("llm_call_failed", agent=agent, error=str(e))
        raise TransportError(f"{agent} call failed: {e}", e) from e

    # LangChain chat models return messages, plain models return strings
    text = response.content if hasattr(response, "content") else str(response)
    logger.debug("llm_call_complete", agent=agent, length=len(text))
    return text
