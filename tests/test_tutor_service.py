import base64
import io
import json

import pytest
from PIL import Image

from studyaid.application.services.prompts import ANALYSIS_SYSTEM_INSTRUCTION
from studyaid.application.services.tutor_service import TutorService, decode_response, extract_json_object
from studyaid.exceptions import CollaboratorUnavailableError, ResponseDecodeError
from studyaid.schemas.analysis.analysis import AnalysisResult, Subject

ANALYSIS_REPLY = {
    "mistakeDiagnosis": "把加速度方向弄反了",
    "coreConcept": "牛顿第二定律",
    "stepByStepSolution": ["受力分析", "列方程 F=ma", "求解"],
    "practiceQuestion": {"question": "质量2kg受力4N，加速度？", "answer": "2 m/s²", "explanation": "a=F/m"},
}

VOCAB_REPLY = {
    "topic": "环保",
    "words": [
        {"word": "pollution", "pronunciation": "/pəˈluːʃn/", "definition": "污染", "example": "Air pollution is serious."},
        {"word": "recycle", "pronunciation": "/ˌriːˈsaɪkl/", "definition": "回收", "example": "We recycle paper."},
    ],
}


class FakeAI:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate_json(self, prompt, response_schema, image_bytes=None, mime_type=None, system_instruction=None):
        self.calls.append({
            "prompt": prompt,
            "schema": response_schema,
            "image_bytes": image_bytes,
            "mime_type": mime_type,
            "system_instruction": system_instruction,
        })
        if self.error:
            raise self.error
        return self.reply


def png_data_url() -> str:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), "white").save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode()


def test_analyze_problem_decodes_result():
    ai = FakeAI(reply=json.dumps(ANALYSIS_REPLY, ensure_ascii=False))
    result = TutorService(ai_provider=ai).analyze_problem("小车加速度？", Subject.PHYSICS)
    assert result.core_concept == "牛顿第二定律"
    assert result.steps == ["受力分析", "列方程 F=ma", "求解"]
    assert result.practice_question.answer == "2 m/s²"


def test_analyze_problem_prompt_names_subject_and_question():
    ai = FakeAI(reply=json.dumps(ANALYSIS_REPLY))
    TutorService(ai_provider=ai).analyze_problem("小车加速度？", Subject.PHYSICS)
    call = ai.calls[0]
    assert "物理" in call["prompt"]
    assert "小车加速度？" in call["prompt"]
    assert call["system_instruction"] == ANALYSIS_SYSTEM_INSTRUCTION
    assert "practiceQuestion" in call["schema"]["required"]
    assert call["image_bytes"] is None


def test_analyze_problem_sends_decoded_image():
    ai = FakeAI(reply=json.dumps(ANALYSIS_REPLY))
    TutorService(ai_provider=ai).analyze_problem("", Subject.MATH, png_data_url())
    call = ai.calls[0]
    assert call["mime_type"] == "image/png"
    assert call["image_bytes"].startswith(b"\x89PNG")


def test_missing_practice_question_is_decode_failure():
    reply = dict(ANALYSIS_REPLY)
    del reply["practiceQuestion"]
    ai = FakeAI(reply=json.dumps(reply))
    with pytest.raises(ResponseDecodeError):
        TutorService(ai_provider=ai).analyze_problem("q", Subject.MATH)


def test_wrong_types_are_decode_failure():
    reply = dict(ANALYSIS_REPLY, stepByStepSolution="not a list")
    with pytest.raises(ResponseDecodeError):
        decode_response(json.dumps(reply), AnalysisResult)


@pytest.mark.parametrize("reply", [None, "", "   ", "I cannot help with that."])
def test_empty_or_non_json_reply_is_decode_failure(reply):
    with pytest.raises(ResponseDecodeError):
        TutorService(ai_provider=FakeAI(reply=reply)).analyze_problem("q", Subject.MATH)


def test_json_wrapped_in_code_fence_is_accepted():
    fenced = "```json\n" + json.dumps(ANALYSIS_REPLY) + "\n```"
    assert extract_json_object(fenced).startswith("{")
    assert decode_response(fenced, AnalysisResult).diagnosis == ANALYSIS_REPLY["mistakeDiagnosis"]


def test_provider_error_becomes_unavailable_error():
    ai = FakeAI(error=ConnectionError("network down"))
    with pytest.raises(CollaboratorUnavailableError):
        TutorService(ai_provider=ai).analyze_problem("q", Subject.MATH)


def test_bad_image_is_rejected_before_calling_provider():
    ai = FakeAI(reply=json.dumps(ANALYSIS_REPLY))
    with pytest.raises(ResponseDecodeError):
        TutorService(ai_provider=ai).analyze_problem("q", Subject.MATH, "data:image/png;base64,@@@")
    assert ai.calls == []


def test_generate_vocabulary_accepts_short_lists():
    ai = FakeAI(reply=json.dumps(VOCAB_REPLY, ensure_ascii=False))
    result = TutorService(ai_provider=ai).generate_vocabulary("环保")
    assert result.topic == "环保"
    assert [w.word for w in result.words] == ["pollution", "recycle"]
    assert "环保" in ai.calls[0]["prompt"]
    assert ai.calls[0]["system_instruction"] is None


def test_generate_vocabulary_missing_field_fails():
    reply = {"topic": "环保", "words": [{"word": "pollution", "definition": "污染"}]}
    with pytest.raises(ResponseDecodeError):
        TutorService(ai_provider=FakeAI(reply=json.dumps(reply))).generate_vocabulary("环保")
