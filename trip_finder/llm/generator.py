"""Structured generation on top of ChatOpenAI.

The rest of the package only sees ``generate(prompt, schema) -> str``: the
model is asked for JSON matching ``schema`` and the raw text comes back
unparsed. OpenAI's json_schema response format needs an object at the root,
so array schemas travel wrapped in ``{"items": [...]}`` and are unwrapped on
the way back.
"""

import json
from typing import Any, Dict

from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

from trip_finder.config import settings
from trip_finder.obs.logger import log_event

SYSTEM = """You are a travel research assistant.
Answer ONLY with JSON that matches the response schema you were given.
Prices are estimates in USD.
"""

USER = """{prompt}"""

_WRAP_KEY = "items"


def wrap_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    if schema.get("type") == "object":
        return schema
    return {
        "type": "object",
        "properties": {_WRAP_KEY: schema},
        "required": [_WRAP_KEY],
    }


def unwrap_text(text: str) -> str:
    """Undo ``wrap_schema`` on the model output.

    Anything that doesn't look like the wrapper comes back untouched so the
    caller's parser decides whether it's acceptable.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return text
    if isinstance(data, dict) and _WRAP_KEY in data:
        return json.dumps(data[_WRAP_KEY])
    return text


def create_llm() -> ChatOpenAI:
    return ChatOpenAI(
        model=settings.OPENAI_MODEL,
        temperature=0,
        api_key=settings.OPENAI_API_KEY,
    )


class StructuredGenerator:
    """Ask the model for schema-constrained JSON and return the raw text."""

    def __init__(self, llm: ChatOpenAI):
        self.llm = llm
        self.prompt = ChatPromptTemplate.from_messages(
            [("system", SYSTEM), ("user", USER)]
        )

    async def generate(self, prompt: str, schema: Dict[str, Any], name: str = "response") -> str:
        wrapped = schema.get("type") != "object"
        response_format = {
            "type": "json_schema",
            "json_schema": {"name": name, "schema": wrap_schema(schema), "strict": False},
        }
        msg = self.prompt.format_messages(prompt=prompt)
        res = await self.llm.bind(response_format=response_format).ainvoke(msg)

        text = res.content if isinstance(res.content, str) else json.dumps(res.content)
        log_event("llm_response", level="DEBUG", schema_name=name, chars=len(text))
        return unwrap_text(text) if wrapped else text
