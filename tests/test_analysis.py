import functools
import json

import pytest

from conftest import StubInvoker, fake_client
from scriptmimic.analysis import ensure_unique_name, extract_style_profile, substantial_transcripts
from scriptmimic.errors import (
    AnalysisFailed,
    DuplicateProfileName,
    InsufficientInput,
    ProviderError,
    SchemaViolation,
)
from scriptmimic.generators.prompt_builders import TRANSCRIPT_SEPARATOR
from scriptmimic.identity import stable_profile_id
from scriptmimic.llm.openai_wrapper import call_llm


def test_short_transcripts_fail_before_any_call():
    stub = StubInvoker()
    with pytest.raises(InsufficientInput):
        extract_style_profile(["short", "tiny"], "Profile", invoke=stub)
    assert stub.calls == []


def test_blank_name_fails_before_any_call(transcript):
    stub = StubInvoker()
    with pytest.raises(InsufficientInput):
        extract_style_profile([transcript], "   ", invoke=stub)
    assert stub.calls == []


def test_substantial_transcripts_trim_and_filter(transcript):
    padded = "   " + transcript + "\n\n"
    assert substantial_transcripts(["", padded, "x" * 100, "y" * 101]) == [transcript, "y" * 101]


def test_end_to_end_with_canned_model_reply(tmp_path, dna_payload, transcript):
    client = fake_client(json.dumps(dna_payload))
    invoke = functools.partial(call_llm, client=client, cost_log=tmp_path / "c.csv")
    second = transcript.upper()

    dna = extract_style_profile(["  " + transcript + "  ", "short", second], " Investigator ", invoke=invoke)

    assert dna.id == stable_profile_id("Investigator", [transcript, second])
    assert dna.name == "Investigator"
    doc = dna.to_document()
    for section, fields in dna_payload.items():
        assert doc[section] == fields
    sent = client.chat.completions.calls[0]
    user = sent["messages"][1]["content"]
    assert len(user.split(TRANSCRIPT_SEPARATOR)) == 2
    assert "short" not in user.split(TRANSCRIPT_SEPARATOR)[-1]


def test_reanalysis_keeps_the_same_id(dna_payload, transcript):
    first = extract_style_profile([transcript], "P", invoke=StubInvoker(dna_payload))
    dna_payload["narrative"]["hookType"] = "something else entirely"
    second = extract_style_profile([transcript], "P", invoke=StubInvoker(dna_payload))
    assert first.id == second.id
    assert first.narrative.hook_type != second.narrative.hook_type


def test_model_supplied_identity_is_ignored(dna_payload, transcript):
    dna_payload["id"] = "dna-hijack"
    dna = extract_style_profile([transcript], "P", invoke=StubInvoker(dna_payload))
    assert dna.id == stable_profile_id("P", [transcript])


def test_incomplete_reply_becomes_analysis_failed(tmp_path, dna_payload, transcript):
    del dna_payload["linguistic"]["formality"]
    client = fake_client(json.dumps(dna_payload))
    invoke = functools.partial(call_llm, client=client, cost_log=tmp_path / "c.csv")
    with pytest.raises(AnalysisFailed) as exc:
        extract_style_profile([transcript], "P", invoke=invoke)
    assert isinstance(exc.value.__cause__, SchemaViolation)


def test_provider_error_becomes_analysis_failed(transcript):
    cause = ProviderError("quota")
    stub = StubInvoker(cause)
    with pytest.raises(AnalysisFailed) as exc:
        extract_style_profile([transcript], "P", invoke=stub)
    assert exc.value.__cause__ is cause
    assert len(stub.calls) == 1


def test_unique_name_check_is_case_insensitive(profile):
    ensure_unique_name([profile], "Someone Else")
    with pytest.raises(DuplicateProfileName):
        ensure_unique_name([profile], "  investigator ")


def test_environment_settings_apply_without_explicit_settings(monkeypatch, dna_payload, transcript):
    monkeypatch.setenv("SCRIPTMIMIC_ANALYSIS_MODEL", "env-analysis-model")
    stub = StubInvoker(dna_payload)
    extract_style_profile([transcript], "P", invoke=stub)
    assert stub.calls[0]["model"] == "env-analysis-model"
