import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from trip_finder.llm.generator import StructuredGenerator, unwrap_text, wrap_schema
from trip_finder.llm.schemas import AIRPORT_SUGGESTION_SCHEMA, FLIGHT_SEARCH_SCHEMA


def mock_llm(content: str):
    bound = MagicMock()
    bound.ainvoke = AsyncMock(return_value=SimpleNamespace(content=content))
    llm = MagicMock()
    llm.bind.return_value = bound
    return llm, bound


def test_object_schema_is_not_wrapped():
    assert wrap_schema(FLIGHT_SEARCH_SCHEMA) is FLIGHT_SEARCH_SCHEMA


def test_array_schema_is_wrapped():
    wrapped = wrap_schema(AIRPORT_SUGGESTION_SCHEMA)
    assert wrapped["type"] == "object"
    assert wrapped["properties"]["items"] is AIRPORT_SUGGESTION_SCHEMA
    assert wrapped["required"] == ["items"]


def test_unwrap_text():
    assert json.loads(unwrap_text('{"items": [{"a": 1}]}')) == [{"a": 1}]
    # Not the wrapper: untouched for the caller to judge
    assert unwrap_text("[1, 2]") == "[1, 2]"
    assert unwrap_text("garbage") == "garbage"


async def test_generate_passes_json_schema_response_format():
    llm, bound = mock_llm('{"departureFlights": [], "returnFlights": [], "summary": []}')
    gen = StructuredGenerator(llm)

    text = await gen.generate("Find flights", FLIGHT_SEARCH_SCHEMA, name="flight_search")

    assert json.loads(text)["summary"] == []
    response_format = llm.bind.call_args.kwargs["response_format"]
    assert response_format["type"] == "json_schema"
    assert response_format["json_schema"]["name"] == "flight_search"
    assert response_format["json_schema"]["schema"] is FLIGHT_SEARCH_SCHEMA

    messages = bound.ainvoke.call_args.args[0]
    assert messages[-1].content == "Find flights"


async def test_generate_unwraps_array_results():
    llm, _ = mock_llm('{"items": [{"name": "Heathrow", "iata": "LHR", "location": "London, UK"}]}')
    gen = StructuredGenerator(llm)

    text = await gen.generate("London", AIRPORT_SUGGESTION_SCHEMA)

    assert json.loads(text)[0]["iata"] == "LHR"


async def test_prompt_with_braces_is_not_templated():
    llm, bound = mock_llm("{}")
    gen = StructuredGenerator(llm)

    await gen.generate('Return {"key": 1}', FLIGHT_SEARCH_SCHEMA)

    assert bound.ainvoke.call_args.args[0][-1].content == 'Return {"key": 1}'


async def test_generate_propagates_failures():
    llm = MagicMock()
    llm.bind.return_value.ainvoke = AsyncMock(side_effect=RuntimeError("401 unauthorized"))
    gen = StructuredGenerator(llm)

    with pytest.raises(RuntimeError):
        await gen.generate("x", FLIGHT_SEARCH_SCHEMA)
