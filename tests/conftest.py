import os
import sys
import asyncio
import inspect

import pytest

# Ensure project root is on sys.path so `import trip_finder` works in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Settings require a key at import time; tests never reach the real API
os.environ.setdefault("OPENAI_API_KEY", "test-key")


def pytest_pyfunc_call(pyfuncitem):
    """Allow running async tests without pytest-asyncio.

    If the test function is a coroutine, run it in a fresh event loop.
    """
    testfunction = pyfuncitem.obj
    if inspect.iscoroutinefunction(testfunction):
        funcargs = pyfuncitem.funcargs
        sig = inspect.signature(testfunction)
        # Filter only the parameters that the test function expects
        allowed = {name: funcargs[name] for name in sig.parameters.keys() if name in funcargs}
        asyncio.run(testfunction(**allowed))
        return True
    return None


class FakeGenerator:
    """Stand-in for StructuredGenerator that records calls.

    ``responses`` are returned in order (the last one repeats); an exception
    instance in the list is raised instead of returned.
    """

    def __init__(self, *responses, delay: float = 0.0):
        self.responses = list(responses) or ["[]"]
        self.delay = delay
        self.calls = []

    async def generate(self, prompt, schema, name="response"):
        self.calls.append({"prompt": prompt, "schema": schema, "name": name})
        if self.delay:
            await asyncio.sleep(self.delay)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def fake_generator():
    """Factory fixture: fake_generator('{"a": 1}', RuntimeError("boom"), delay=0.01)"""
    return FakeGenerator
