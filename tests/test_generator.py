import asyncio
import json

import pytest

from studykit.modules.generation.errors import GenerationError, GenerationErrorKind
from studykit.modules.generation.results import (
    FailureResult,
    StructuredResult,
    TextResult,
)
from studykit.modules.generation.shapes import QuizQuestionSet
from studykit.modules.generation.tasks import (
    ChatMessage,
    ChatTask,
    ExplanationTask,
    FlashcardTask,
    InterviewTask,
    QuizTask,
)
from tests.conftest import QUIZ_JSON, ScriptedGenerator

ALL_TASKS = [
    ExplanationTask(topic="Osmosis", difficulty="intermediate"),
    QuizTask(topic="Osmosis"),
    FlashcardTask(topic="Osmosis"),
    InterviewTask(role="Backend Engineer"),
    ChatTask(topic_title="Osmosis", topic_content="Water moves.", question="Why?"),
]


@pytest.mark.asyncio
async def test_fenced_quiz_output_becomes_structured(make_client):
    raw = (
        '```json\n{"questions":[{"question":"Q","options":["A","B","C","D"],'
        '"correctAnswer":2,"explanation":"E"}]}\n```'
    )
    client, _ = make_client(raw)

    result = await client.generate(QuizTask(topic="Anything"))

    assert isinstance(result, StructuredResult)
    assert result.ok
    quiz = result.value
    assert isinstance(quiz, QuizQuestionSet)
    assert len(quiz.questions) == 1
    assert quiz.questions[0].correct_answer == 2
    assert quiz.questions[0].options == ["A", "B", "C", "D"]


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["", None])
@pytest.mark.parametrize("task", ALL_TASKS, ids=lambda t: t.kind)
async def test_empty_output_always_fails(make_client, task, raw):
    client, _ = make_client(raw)

    result = await client.generate(task)

    assert isinstance(result, FailureResult)
    assert not result.ok
    assert result.error is GenerationErrorKind.EMPTY_RESPONSE


@pytest.mark.asyncio
async def test_invalid_json_reports_malformed_with_raw_text(make_client):
    client, _ = make_client("{not json")

    result = await client.generate(QuizTask(topic="Anything"))

    assert isinstance(result, FailureResult)
    assert result.error is GenerationErrorKind.MALFORMED_JSON
    assert result.raw_text == "{not json"


@pytest.mark.asyncio
async def test_shape_violation_names_the_field(make_client):
    payload = json.loads(QUIZ_JSON)
    payload["questions"][0]["options"] = ["A", "B", "C"]
    client, _ = make_client(json.dumps(payload))

    result = await client.generate(QuizTask(topic="Planets"))

    assert result.error is GenerationErrorKind.SHAPE_MISMATCH
    assert result.field == "questions[0].options"


@pytest.mark.asyncio
async def test_free_form_text_is_returned_verbatim(make_client):
    client, _ = make_client("Left brace {")

    result = await client.generate(ExplanationTask(topic="Sets", difficulty="beginner"))

    assert isinstance(result, TextResult)
    assert result.text == "Left brace {"


@pytest.mark.asyncio
async def test_chat_reply_is_text_even_if_it_looks_like_json(make_client):
    client, _ = make_client('{"questions": []}')

    result = await client.generate(
        ChatTask(topic_title="Sets", question="Show me JSON for an empty set")
    )

    assert isinstance(result, TextResult)
    assert result.text == '{"questions": []}'


@pytest.mark.asyncio
async def test_provider_exception_becomes_provider_error(make_client):
    boom = ConnectionError("connection reset by peer")
    client, _ = make_client(boom)

    result = await client.generate(FlashcardTask(topic="Sets"))

    assert isinstance(result, FailureResult)
    assert result.error is GenerationErrorKind.PROVIDER_ERROR
    assert "connection reset by peer" in result.message

    with pytest.raises(GenerationError) as exc:
        result.unwrap()
    assert exc.value.kind is GenerationErrorKind.PROVIDER_ERROR


@pytest.mark.asyncio
async def test_missing_credentials_surface_as_provider_error(test_settings):
    from studykit.modules.generation.generator import StructuredGenerationClient

    client = StructuredGenerationClient(settings=test_settings)

    result = await client.generate(QuizTask(topic="Sets"))

    assert result.error is GenerationErrorKind.PROVIDER_ERROR
    assert "GEMINI_API_KEY" in result.message


@pytest.mark.asyncio
async def test_one_provider_call_per_generation(make_client):
    client, generator = make_client("{broken")

    await client.generate(QuizTask(topic="Sets"))

    assert len(generator.prompts) == 1


@pytest.mark.asyncio
async def test_chat_uses_configured_assistant_name(make_client, test_settings):
    client, generator = make_client("Sure!")
    test_settings.chat.assistant_name = "Professor Owl"

    await client.generate(ChatTask(topic_title="Owls", question="Do owls sleep?"))

    assert generator.prompts[0].system.startswith('You are "Professor Owl"')


@pytest.mark.asyncio
async def test_wrappers_return_typed_values(make_client):
    client, generator = make_client(QUIZ_JSON)

    quiz = await client.generate_quiz("Planets", question_count=1)

    assert quiz.questions[0].options[quiz.questions[0].correct_answer] == "Mercury"
    assert "exactly 1 multiple-choice questions" in generator.prompts[0].user
    assert quiz.model_dump(by_alias=True) == json.loads(QUIZ_JSON)


@pytest.mark.asyncio
async def test_wrappers_raise_generation_error(make_client):
    client, _ = make_client('{"cards": [{"front": "only front"}]}')

    with pytest.raises(GenerationError) as exc:
        await client.generate_flashcards("Sets", card_count=3)

    assert exc.value.kind is GenerationErrorKind.SHAPE_MISMATCH
    assert exc.value.field == "cards[0].back"


@pytest.mark.asyncio
async def test_interview_wrapper(make_client):
    reply = json.dumps(
        {
            "questions": [f"Question {i}" for i in range(1, 6)],
            "tips": "Use the STAR method and explain trade-offs.",
        }
    )
    client, generator = make_client(reply)

    result = await client.generate_interview_questions("DevOps Engineer", "entry")

    assert len(result.questions) == 5
    assert result.tips.startswith("Use the STAR")
    assert "entry level DevOps Engineer" in generator.prompts[0].user


@pytest.mark.asyncio
async def test_chat_wrapper_passes_history_through(make_client):
    client, generator = make_client("  Refraction bends light.  ")
    history = [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello! Ready to learn optics?"},
    ]

    reply = await client.generate_chat_reply(
        "Optics", "Light and lenses.", history, "What is refraction?"
    )

    assert reply == "Refraction bends light."
    prompt = generator.prompts[0]
    assert [m.role for m in prompt.history] == ["user", "assistant"]
    assert prompt.user == "What is refraction?"


@pytest.mark.asyncio
async def test_explanation_wrapper(make_client):
    client, generator = make_client("Plants make food from light.")

    text = await client.generate_explanation(
        "Photosynthesis", "beginner", context="Grade 4 science"
    )

    assert text == "Plants make food from light."
    assert generator.prompts[0].user.endswith("Context: Grade 4 science")


@pytest.mark.asyncio
async def test_concurrent_calls_do_not_interfere(test_settings):
    from studykit.modules.generation.generator import StructuredGenerationClient

    async def reply_for(prompt):
        topic = "Alpha" if "Alpha" in prompt.user else "Beta"
        # The first call finishes last
        await asyncio.sleep(0.05 if topic == "Alpha" else 0)
        if prompt.shape is not None:
            return json.dumps({"cards": [{"front": topic, "back": f"{topic} back"}]})
        return f"About {topic}"

    class SlowGenerator(ScriptedGenerator):
        async def generate_text(self, prompt):
            self.prompts.append(prompt)
            return await reply_for(prompt)

    client = StructuredGenerationClient(SlowGenerator(None), settings=test_settings)

    cards, text = await asyncio.gather(
        client.generate(FlashcardTask(topic="Alpha")),
        client.generate(ExplanationTask(topic="Beta", difficulty="advanced")),
    )

    assert isinstance(cards, StructuredResult)
    assert cards.value.cards[0].front == "Alpha"
    assert isinstance(text, TextResult)
    assert text.text == "About Beta"


@pytest.mark.asyncio
async def test_structured_history_messages_are_accepted(make_client):
    client, generator = make_client("Yes.")

    await client.generate(
        ChatTask(
            topic_title="Owls",
            history=[ChatMessage(role="user", content="Are owls birds?")],
            question="Really?",
        )
    )

    assert generator.prompts[0].history[0].content == "Are owls birds?"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        '{"questions": [{"correctAnswer": ' + "1" * 5000 + "}]}",
        "[" * 200000 + "]" * 200000,
    ],
    ids=["huge-integer", "deep-nesting"],
)
async def test_undecodable_json_returns_failure(make_client, raw):
    client, _ = make_client(raw)

    result = await client.generate(QuizTask(topic="Anything"))

    assert isinstance(result, FailureResult)
    assert result.error is GenerationErrorKind.MALFORMED_JSON
    assert result.raw_text == raw
