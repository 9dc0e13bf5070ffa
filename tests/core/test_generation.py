"""
Test suite for answer generation.

Tests prompt assembly, template routing, Gemini model failover and the
response generator's streaming and fallback contract.

System role: Verification of the generation stage of the RAG pipeline
"""

from collections.abc import AsyncIterator

import pytest
from langchain_core.messages import AIMessage, AIMessageChunk, HumanMessage, SystemMessage

from portfolio_chat.core.exceptions import (
    GenerationBackendError,
    GenerationInterruptedError,
    IncompleteResponseError,
)
from portfolio_chat.core.generation.base import GenerationBackend, GenerationRequest
from portfolio_chat.core.generation.generator import ResponseGenerator, collect_stream
from portfolio_chat.core.generation.llm_backend import GeminiGenerationBackend
from portfolio_chat.core.generation.prompts import NO_CONTEXT, build_messages, format_context
from portfolio_chat.core.generation.template_backend import (
    TemplateGenerationBackend,
    parse_fields,
)
from portfolio_chat.core.safety.messages import FallbackType, get_fallback_response
from portfolio_chat.models.chat import ChatMessage, ChatRole
from portfolio_chat.models.content import Category, DocumentMetadata
from portfolio_chat.models.search import SearchResult
from portfolio_chat.models.streaming import StreamEvent, StreamEventType

SERVICE_TEXT = (
    "Service: MERN Stack Development\n"
    "Price: $30 per hour\n"
    "Description: Building scalable web applications."
)


def _result(
    text: str,
    category: Category,
    title: str = "Title",
    score: float = 0.9,
) -> SearchResult:
    return SearchResult(
        chunk_id=f"{category.value}-chunk-0",
        text=text,
        score=score,
        category=category,
        title=title,
        metadata=DocumentMetadata(source=f"tests#{category.value}"),
    )


@pytest.fixture
def service_result() -> SearchResult:
    return _result(SERVICE_TEXT, Category.SERVICES, title="MERN Stack Development")


@pytest.fixture
def skill_result() -> SearchResult:
    return _result(
        "Technology: Docker\nCategory: Containerization Platform",
        Category.SKILLS,
        title="Docker",
    )


class ScriptedBackend(GenerationBackend):
    """Backend yielding fixed pieces, optionally failing after some of them."""

    name = "scripted"

    def __init__(self, pieces: list[str], fail_after: int | None = None) -> None:
        self.pieces = pieces
        self.fail_after = fail_after

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        for i, piece in enumerate(self.pieces):
            if self.fail_after is not None and i == self.fail_after:
                raise RuntimeError("backend went away")
            yield piece
        if self.fail_after is not None and self.fail_after >= len(self.pieces):
            raise RuntimeError("backend went away")


class FakeChatModel:
    """Stand-in for a LangChain chat model's astream."""

    def __init__(self, chunks: list, error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error
        self.received = None

    async def astream(self, messages):
        self.received = messages
        for chunk in self.chunks:
            yield AIMessageChunk(content=chunk)
        if self.error is not None:
            raise self.error


async def _events(generator: ResponseGenerator, results, query: str = "q") -> list[StreamEvent]:
    return [event async for event in generator.generate(results, query)]


class TestPrompt:
    """Test suite for prompt construction."""

    def test_format_context_should_number_results(self, service_result, skill_result) -> None:
        """Test context blocks carry section, confidence and source."""
        # Act
        context = format_context([service_result, skill_result])

        # Assert
        assert "### Result 1 (Confidence: 90%, Section: services)" in context
        assert "### Result 2 (Confidence: 90%, Section: skills)" in context
        assert "**Source:** tests#services" in context
        assert "Price: $30 per hour" in context

    def test_format_context_should_handle_empty(self) -> None:
        """Test empty results render a placeholder."""
        # Act / Assert
        assert format_context([]) == NO_CONTEXT

    def test_build_messages_should_place_history_between_system_and_question(
        self, service_result
    ) -> None:
        """Test message order is system, history, human."""
        # Arrange
        history = [
            ChatMessage(role=ChatRole.USER, content="Hi"),
            ChatMessage(role=ChatRole.ASSISTANT, content="Hello!"),
        ]

        # Act
        messages = build_messages("What do you charge?", [service_result], history)

        # Assert
        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
        assert "ONLY use information from the RETRIEVED CONTEXT" in messages[0].content
        assert "User Question: What do you charge?" in messages[-1].content
        assert "MERN Stack Development" in messages[-1].content


class TestTemplateBackend:
    """Test suite for TemplateGenerationBackend."""

    def test_parse_fields_should_read_key_value_lines(self) -> None:
        """Test 'Key: value' lines are parsed, bullets included."""
        # Act
        fields = parse_fields(SERVICE_TEXT + "\n- Upwork: https://example.com")

        # Assert
        assert fields["Service"] == "MERN Stack Development"
        assert fields["Price"] == "$30 per hour"
        assert fields["Upwork"] == "https://example.com"

    def test_pricing_question_should_use_retrieved_price(self, service_result, skill_result) -> None:
        """Test services route answers with the price from the results only."""
        # Arrange
        backend = TemplateGenerationBackend(word_delay_seconds=0)
        request = GenerationRequest(
            question="What do you charge for web development?",
            results=[skill_result, service_result],
        )

        # Act
        answer = backend.answer(request)

        # Assert
        assert answer.startswith("According to the services section")
        assert "**MERN Stack Development** ($30 per hour): Building scalable web applications." in answer
        assert "Docker" not in answer

    def test_route_should_require_matching_category(self, skill_result) -> None:
        """Test a pricing question without service results falls through."""
        # Arrange
        backend = TemplateGenerationBackend(word_delay_seconds=0)
        request = GenerationRequest(question="What do you charge?", results=[skill_result])

        # Act
        answer = backend.answer(request)

        # Assert
        assert "services section" not in answer
        assert "$" not in answer

    def test_skills_question_should_list_technologies(self, skill_result) -> None:
        """Test skills route."""
        # Arrange
        backend = TemplateGenerationBackend(word_delay_seconds=0)
        request = GenerationRequest(question="Which tech stack do you know?", results=[skill_result])

        # Act
        answer = backend.answer(request)

        # Assert
        assert "**Docker** (Containerization Platform)" in answer

    def test_unrouted_question_should_return_leading_sentences(self) -> None:
        """Test sentence fallback keeps sentences longer than 20 characters."""
        # Arrange
        text = "Short one. This sentence is clearly long enough! Another sufficiently long sentence here. Tiny."
        backend = TemplateGenerationBackend(word_delay_seconds=0)
        request = GenerationRequest(question="Tell me something", results=[_result(text, Category.FAQ)])

        # Act
        answer = backend.answer(request)

        # Assert
        assert answer == "This sentence is clearly long enough! Another sufficiently long sentence here."

    def test_unstructured_service_text_should_keep_price(self) -> None:
        """Test a services result without field lines is answered from its text."""
        # Arrange
        backend = TemplateGenerationBackend(word_delay_seconds=0)
        result = _result("MERN Stack Development, $30/hour", Category.SERVICES, title="MERN Stack Development")
        request = GenerationRequest(question="What do you charge for web development?", results=[result])

        # Act
        answer = backend.answer(request)

        # Assert
        assert "**MERN Stack Development**: MERN Stack Development, $30/hour" in answer
        assert "$30" in answer

    def test_later_window_should_keep_its_text(self) -> None:
        """Test a continuation chunk without a Service line still contributes its facts."""
        # Arrange
        backend = TemplateGenerationBackend(word_delay_seconds=0)
        continuation = _result(
            "Completed Works: 12\nTotal Hours Worked: 400",
            Category.SERVICES,
            title="MERN Stack Development",
        )
        request = GenerationRequest(question="What services do you offer?", results=[continuation])

        # Act
        answer = backend.answer(request)

        # Assert
        assert "**MERN Stack Development**: Completed Works: 12 Total Hours Worked: 400" in answer

    def test_testimonial_without_feedback_field_should_keep_text(self) -> None:
        """Test testimonials route falls back to the retrieved text."""
        # Arrange
        backend = TemplateGenerationBackend(word_delay_seconds=0)
        result = _result("Great developer, delivered on time.", Category.TESTIMONIALS, title="Jane")
        request = GenerationRequest(question="Any client reviews?", results=[result])

        # Act
        answer = backend.answer(request)

        # Assert
        assert "**Jane**: Great developer, delivered on time." in answer

    def test_sentence_fallback_should_not_split_inside_tokens(self) -> None:
        """Test periods inside names, prices and URLs are not sentence breaks."""
        # Arrange
        text = (
            "The landing page was built with Next.js and Tailwind. "
            "Hosting starts at $29.99 on https://example.com/plans today."
        )
        backend = TemplateGenerationBackend(word_delay_seconds=0)
        request = GenerationRequest(question="Tell me something", results=[_result(text, Category.FAQ)])

        # Act
        answer = backend.answer(request)

        # Assert
        assert answer == text

    async def test_stream_should_reassemble_to_answer(self, service_result) -> None:
        """Test word-by-word stream concatenates to the full answer."""
        # Arrange
        backend = TemplateGenerationBackend(word_delay_seconds=0)
        request = GenerationRequest(question="What services do you offer?", results=[service_result])

        # Act
        pieces = [piece async for piece in backend.stream(request)]

        # Assert
        assert len(pieces) > 1
        assert "".join(pieces) == backend.answer(request)


class TestGeminiBackend:
    """Test suite for GeminiGenerationBackend model failover."""

    async def test_first_model_should_stream(self, service_result) -> None:
        """Test text from the first model is yielded."""
        # Arrange
        model = FakeChatModel(["Aasim charges ", "$30 per hour."])
        backend = GeminiGenerationBackend(["m1", "m2"], model_factory=lambda name: model)
        request = GenerationRequest(question="Rate?", results=[service_result])

        # Act
        pieces = [piece async for piece in backend.stream(request)]

        # Assert
        assert "".join(pieces) == "Aasim charges $30 per hour."
        assert isinstance(model.received[0], SystemMessage)

    async def test_failing_model_should_fall_through_to_next(self, service_result) -> None:
        """Test a model failing before output is skipped."""
        # Arrange
        models = {
            "m1": FakeChatModel([], error=RuntimeError("404 model not found")),
            "m2": FakeChatModel([""]),
            "m3": FakeChatModel(["answer"]),
        }
        tried: list[str] = []

        def factory(name: str):
            tried.append(name)
            return models[name]

        backend = GeminiGenerationBackend(["m1", "m2", "m3"], model_factory=factory)

        # Act
        pieces = [piece async for piece in backend.stream(GenerationRequest(question="q", results=[service_result]))]

        # Assert
        assert pieces == ["answer"]
        assert tried == ["m1", "m2", "m3"]

    async def test_all_models_failing_should_raise(self, service_result) -> None:
        """Test GenerationBackendError when no model produces text."""
        # Arrange
        backend = GeminiGenerationBackend(
            ["m1", "m2"],
            model_factory=lambda name: FakeChatModel([], error=RuntimeError("quota")),
        )

        # Act / Assert
        with pytest.raises(GenerationBackendError):
            async for _ in backend.stream(GenerationRequest(question="q", results=[service_result])):
                pass

    async def test_mid_stream_failure_should_not_switch_models(self, service_result) -> None:
        """Test failure after output raises GenerationInterruptedError."""
        # Arrange
        tried: list[str] = []

        def factory(name: str):
            tried.append(name)
            return FakeChatModel(["partial"], error=RuntimeError("connection reset"))

        backend = GeminiGenerationBackend(["m1", "m2"], model_factory=factory)
        pieces: list[str] = []

        # Act / Assert
        with pytest.raises(GenerationInterruptedError):
            async for piece in backend.stream(GenerationRequest(question="q", results=[service_result])):
                pieces.append(piece)
        assert pieces == ["partial"]
        assert tried == ["m1"]

    def test_empty_model_list_should_be_rejected(self) -> None:
        """Test construction requires at least one model."""
        # Act / Assert
        with pytest.raises(ValueError):
            GeminiGenerationBackend([], model_factory=lambda name: None)


class TestResponseGenerator:
    """Test suite for ResponseGenerator."""

    async def test_primary_stream_should_end_with_done(self, service_result) -> None:
        """Test chunk events followed by exactly one done."""
        # Arrange
        generator = ResponseGenerator(primary=ScriptedBackend(["Hello", " world"]))

        # Act
        events = await _events(generator, [service_result])

        # Assert
        assert [e.event for e in events] == [
            StreamEventType.CHUNK,
            StreamEventType.CHUNK,
            StreamEventType.DONE,
        ]
        assert events[0].to_dict() == {"chunk": "Hello"}
        assert events[-1].to_dict() == {"done": True}

    async def test_primary_failing_before_text_should_use_template(self, service_result) -> None:
        """Test failover to the template backend when the primary cannot start."""
        # Arrange
        generator = ResponseGenerator(
            primary=ScriptedBackend(["never"], fail_after=0),
            fallback=TemplateGenerationBackend(word_delay_seconds=0),
        )

        # Act
        answer = await collect_stream(generator.generate([service_result], "What are your prices?"))

        # Assert
        assert "$30 per hour" in answer

    async def test_primary_failing_mid_stream_should_emit_error_without_done(
        self, service_result
    ) -> None:
        """Test interrupted stream ends with an error event and no done."""
        # Arrange
        generator = ResponseGenerator(primary=ScriptedBackend(["Hello", " world"], fail_after=1))

        # Act
        events = await _events(generator, [service_result])

        # Assert
        assert [e.event for e in events] == [StreamEventType.CHUNK, StreamEventType.ERROR]
        assert events[-1].to_dict() == {
            "error": True,
            "message": get_fallback_response(FallbackType.ERROR),
        }

    async def test_without_primary_should_answer_from_templates(self, service_result) -> None:
        """Test template-only generator still ends with done."""
        # Arrange
        generator = ResponseGenerator(primary=None, fallback=TemplateGenerationBackend(word_delay_seconds=0))

        # Act
        events = await _events(generator, [service_result], "What services do you offer?")

        # Assert
        assert events[-1].event == StreamEventType.DONE
        assert sum(1 for e in events if e.event == StreamEventType.DONE) == 1

    async def test_collect_stream_should_raise_on_error_event(self, service_result) -> None:
        """Test an interrupted stream is never reported as a complete answer."""
        # Arrange
        generator = ResponseGenerator(primary=ScriptedBackend(["Hello", " world"], fail_after=1))

        # Act / Assert
        with pytest.raises(IncompleteResponseError):
            await collect_stream(generator.generate([service_result], "q"))

    async def test_collect_stream_should_raise_without_done(self) -> None:
        """Test a stream that simply stops is incomplete."""

        # Arrange
        async def truncated():
            yield StreamEvent.chunk("partial")

        # Act / Assert
        with pytest.raises(IncompleteResponseError):
            await collect_stream(truncated())
