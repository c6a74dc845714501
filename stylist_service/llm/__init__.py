# LLM module
from stylist_service.llm.gemini_client import GeminiVisionClient
from stylist_service.llm.openai_client import OpenAIImageClient
