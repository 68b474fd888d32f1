# services/llm.py
import httpx
import openai
import logging
import traceback
from typing import Dict, List, Optional

import config

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

class LLMError(Exception):
    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

def _error_for_status(status_code: int, detail) -> LLMError:
    if status_code == 401:
        return LLMError("Invalid AI API key. Check AI_API_KEY in the .env file.", 401)
    if status_code == 402:
        return LLMError("Insufficient balance on the AI provider account.", 402)
    if status_code == 429:
        return LLMError("AI provider rate limit exceeded. Try again later.", 429)
    if status_code in (500, 503):
        return LLMError("AI provider is temporarily unavailable. Try again later.", 503)
    return LLMError(f"Error from AI provider: {detail}", 502)

def extract_content(response_data: dict) -> str:
    if "choices" not in response_data or not response_data["choices"]:
        logger.error("AI response missing 'choices' field")
        raise LLMError("AI response missing 'choices' field")

    choice = response_data["choices"][0]
    if "message" in choice and "content" in choice["message"]:
        return choice["message"]["content"]
    elif "text" in choice:
        return choice["text"]
    elif "content" in choice:
        return choice["content"]
    logger.error("AI response missing expected content field")
    raise LLMError("AI response missing expected content field")

async def _http_completion(messages, model, temperature, max_tokens) -> str:
    try:
        async with httpx.AsyncClient(timeout=config.AI_TIMEOUT_SECONDS) as client:
            response = await client.post(
                f"{config.AI_API_URL.rstrip('/')}/chat/completions",
                json={
                    "model": model,
                    "messages": messages,
                    "stream": False,
                    "temperature": temperature,
                    "max_tokens": max_tokens
                },
                headers={"Authorization": f"Bearer {config.AI_API_KEY}"}
            )
            response.raise_for_status()
            return extract_content(response.json())
    except httpx.HTTPStatusError as e:
        error_detail = e.response.text or str(e)
        logger.error(f"AI API HTTP error {e.response.status_code}: {error_detail}")
        raise _error_for_status(e.response.status_code, error_detail)
    except httpx.RequestError as e:
        logger.error(f"AI API request error: {str(e)}\nTraceback: {traceback.format_exc()}")
        raise LLMError(f"AI API request error: {str(e)}", 503)

async def _openai_completion(messages, model, temperature, max_tokens) -> str:
    try:
        async with openai.AsyncOpenAI(
            api_key=config.AI_API_KEY,
            base_url=config.AI_API_URL,
            timeout=config.AI_TIMEOUT_SECONDS,
            max_retries=config.AI_MAX_RETRIES,
        ) as client:
            response = await client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            return response.choices[0].message.content or ""
    except openai.APIStatusError as e:
        logger.error(f"OpenAI-compatible API error {e.status_code}: {e.message}")
        raise _error_for_status(e.status_code, e.message)
    except openai.APIConnectionError as e:
        logger.error(f"OpenAI-compatible API connection error: {str(e)}")
        raise LLMError(f"AI API request error: {str(e)}", 503)

async def chat_completion(
    messages: List[Dict[str, str]],
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: int = 2000,
) -> str:
    """Send a chat-completion request to the configured provider and return the reply text."""
    model = model or config.AI_MODEL
    logger.info(f"Chat completion via {config.AI_PROVIDER} provider, model={model}, messages={len(messages)}")
    if config.AI_PROVIDER == "openai":
        return await _openai_completion(messages, model, temperature, max_tokens)
    if config.AI_PROVIDER == "http":
        return await _http_completion(messages, model, temperature, max_tokens)
    raise LLMError(f"Unsupported AI provider: {config.AI_PROVIDER}", 500)
