# llm_adapter.py
"""
LLM adapter for natural language -> SQL.

Exports:
  - clean_sql_query(text)
  - OpenAISQLGenerator(api_key=None, model=None, temperature=None, max_tokens=None, client=None)
  - generate_sql(request, schema, generator, csv_table=None, filename=None)

Notes:
 - Any callable `generator(prompt) -> str` can stand in for OpenAISQLGenerator;
   it should raise GenerationError on failure
 - Expects openai>=1.0.0 style client: from openai import OpenAI
 - Reads OPENAI_API_KEY from env if api_key not passed
"""

import logging
import os
import re
from typing import Callable, Optional

import openai
from openai import OpenAI

import config
from errors import GenerationError
from models import ParsedTable
from prompt_templates import SYSTEM_INSTRUCTIONS, build_generation_prompt

LOG = logging.getLogger(__name__)

SQLGenerator = Callable[[str], str]

_FENCED_BLOCK_RE = re.compile(r"```[ \t]*(?:sqlite|sql)?[ \t]*\n?(.*?)```", re.IGNORECASE | re.DOTALL)
_STRAY_FENCE_RE = re.compile(r"```[ \t]*(?:sqlite|sql)?", re.IGNORECASE)
_COMMENT_LINE_RE = re.compile(r"^[ \t]*--[^\n]*(?:\n|$)", re.MULTILINE)


def clean_sql_query(text: str) -> str:
    """
    Strip the formatting LLMs like to wrap SQL in: markdown code fences and
    whole-line `--` comments. When the text holds a fenced block, only the
    block's content is kept.
    """
    if not text:
        return ""
    m = _FENCED_BLOCK_RE.search(text)
    cleaned = m.group(1) if m else text
    cleaned = _STRAY_FENCE_RE.sub("", cleaned)
    cleaned = _COMMENT_LINE_RE.sub("", cleaned)
    return cleaned.strip()


def _extract_text_from_response(resp) -> str:
    """
    Pull the assistant text out of a chat completion. Raises GenerationError
    when the response has no usable content.
    """
    choices = getattr(resp, "choices", None)
    if choices is None and isinstance(resp, dict):
        choices = resp.get("choices")
    if not choices:
        raise GenerationError("LLM returned no choices")
    choice0 = choices[0]
    msg = choice0.get("message") if isinstance(choice0, dict) else getattr(choice0, "message", None)
    if isinstance(msg, dict):
        content = msg.get("content")
    else:
        content = getattr(msg, "content", None)
    if not content:
        raise GenerationError("LLM returned an empty response")
    return content


class OpenAISQLGenerator:
    """Text in, SQL text out, backed by the OpenAI chat completions API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 temperature: Optional[float] = None, max_tokens: Optional[int] = None,
                 client: Optional[OpenAI] = None):
        self.api_key = api_key
        self.model = model or config.LLM_MODEL
        self.temperature = config.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or config.LLM_MAX_TOKENS
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            api_key = self.api_key or os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise GenerationError("OpenAI API key not provided (OPENAI_API_KEY)")
            self._client = OpenAI(api_key=api_key)
        return self._client

    def __call__(self, prompt: str) -> str:
        client = self._get_client()
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTIONS},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.OpenAIError as e:
            LOG.error("LLM call failed: %s", e)
            raise GenerationError(f"Failed to generate SQL query: {e}")
        return _extract_text_from_response(resp)


def generate_sql(request: str, schema: str, generator: SQLGenerator,
                 csv_table: Optional[ParsedTable] = None,
                 filename: Optional[str] = None) -> str:
    """
    High-level: returns cleaned SQL for `request`.
    Performs:
     - rejects an empty request (GenerationError, 400)
     - builds the prompt from the active schema
     - calls the generator
     - cleans the response and rejects it if nothing is left
    """
    if not request or not request.strip():
        raise GenerationError("Missing prompt in request body", status_code=400)

    prompt = build_generation_prompt(request, schema, csv_table=csv_table, filename=filename)
    raw = generator(prompt)
    sql = clean_sql_query(raw)
    if not sql:
        raise GenerationError("LLM response did not contain a SQL query")
    LOG.debug("Generated SQL for %r: %s", request, sql)
    return sql
