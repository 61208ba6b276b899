import json
from types import SimpleNamespace

import pytest

from scriptmimic.models import StyleDNA

DNA_PAYLOAD = {
    "linguistic": {
        "sentenceRhythm": "short punchy sentences broken by one long build-up",
        "rhetoricalDevices": "rhetorical questions, tricolon, callbacks",
        "emotionLevel": "high, controlled outrage",
        "formality": "casual with precise technical terms",
    },
    "vocabulary": {
        "abstractRatio": "mostly concrete nouns",
        "conflictWordsFrequency": "frequent: fight, collapse, betrayal",
        "lexicalQuirks": ["here's the thing", "let that sink in"],
    },
    "narrative": {
        "hookType": "cold open with a shocking statistic",
        "climaxPlacement": "two thirds in",
        "endingStyle": "open question to the viewer",
        "pacingPattern": "fast-slow-fast",
    },
    "editorial": {
        "perspectiveType": "first person investigator",
        "conflictPriority": "institution versus individual",
        "reasoningStyle": "evidence stacking",
    },
    "safetyRules": {
        "maxSimilarityScale": 0.2,
        "plagiarismGuardInstructions": "never reuse more than five consecutive source words",
    },
}

LONG_TRANSCRIPT = (
    "Here's the thing nobody tells you about the shipping industry. "
    "Ninety percent of everything you own arrived on a boat, and almost nobody "
    "watches the people who run those boats."
)


class FakeCompletions:
    """Stands in for ``client.chat.completions``; replies are consumed in order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        usage = SimpleNamespace(prompt_tokens=120, completion_tokens=30)
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)


def fake_client(*replies):
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(replies)))


class StubInvoker:
    """Invoker double: returns queued values and records every call's kwargs."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def dna_payload():
    return json.loads(json.dumps(DNA_PAYLOAD))


@pytest.fixture
def profile(dna_payload):
    return StyleDNA.model_validate({**dna_payload, "id": "dna-test", "name": "Investigator"})


@pytest.fixture
def transcript():
    return LONG_TRANSCRIPT
