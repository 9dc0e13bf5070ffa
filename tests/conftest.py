"""
Shared test fixtures and configuration for entire test suite.

Provides: Deterministic embedding and tokenizer fakes, a small portfolio
corpus, in-memory settings, vector store and application context fixtures
Dependencies: pytest, sqlalchemy, fastapi
System role: Test infrastructure and fixture management
"""

import re
from pathlib import Path

import pytest

from portfolio_chat.application.context import AppContext
from portfolio_chat.boundary.embeddings.base import EmbeddingFunction
from portfolio_chat.boundary.vdb.vector_store import VectorStore
from portfolio_chat.configs.database import DatabaseSettings
from portfolio_chat.configs.generation import GenerationSettings
from portfolio_chat.configs.safety import SafetySettings
from portfolio_chat.configs.settings import Settings
from portfolio_chat.configs.vector_store import VectorStoreSettings
from portfolio_chat.core.content.facts import (
    ContactDetails,
    PortfolioFacts,
    Profile,
    ServicePlan,
    StackItem,
)
from portfolio_chat.core.generation.base import GenerationBackend, GenerationRequest
from portfolio_chat.models.content import Category, DocumentMetadata, EmbeddedChunk

# Each axis counts words of one topic; the last axis is a constant so no
# text ever embeds to the zero vector.
KEYWORD_AXES: list[frozenset[str]] = [
    frozenset({"service", "services", "charge", "price", "pricing", "rate", "cost", "hour", "offer", "development"}),
    frozenset({"skill", "skills", "technology", "stack", "tech", "expertise"}),
    frozenset({"project", "projects", "built", "showcase"}),
    frozenset({"experience", "role", "company", "career", "worked"}),
    frozenset({"contact", "email", "phone", "reach", "hire"}),
    frozenset({"about", "who", "name", "profile"}),
    frozenset({"testimonial", "client", "feedback", "review"}),
    frozenset({"question", "answer", "faq"}),
]
BASELINE = 0.1
_WORD_RE = re.compile(r"[a-z0-9]+")


def keyword_vector(text: str) -> list[float]:
    """Raw (unnormalized) keyword-axis vector for a text."""
    words = _WORD_RE.findall(text.lower())
    return [float(sum(1 for w in words if w in axis)) for axis in KEYWORD_AXES] + [BASELINE]


class KeywordEmbeddingFunction(EmbeddingFunction):
    """Deterministic embedding: topic word counts, normalized by the base class."""

    def __init__(self) -> None:
        super().__init__(model_name="keyword-axes", dimension=len(KEYWORD_AXES) + 1, batch_size=4)
        self.calls = 0

    def _embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.calls += 1
        return [keyword_vector(text) for text in texts]


class WhitespaceTokenizer:
    """Lossless tokenizer with one token per word (surrounding spaces attached)."""

    def __init__(self) -> None:
        self._pieces: list[str] = []
        self._ids: dict[str, int] = {}

    def encode(self, text: str) -> list[int]:
        tokens = []
        for piece in re.findall(r"\s*\S+\s*|\s+", text):
            if piece not in self._ids:
                self._ids[piece] = len(self._pieces)
                self._pieces.append(piece)
            tokens.append(self._ids[piece])
        return tokens

    def decode(self, tokens: list[int]) -> str:
        return "".join(self._pieces[t] for t in tokens)

    def decode_bytes(self, tokens: list[int]) -> bytes:
        return self.decode(tokens).encode("utf-8")


class TrackedBackend(GenerationBackend):
    """Generative backend recording how far its stream ran and whether it was closed."""

    name = "tracked"

    def __init__(self, pieces: list[str]) -> None:
        self.pieces = pieces
        self.yielded = 0
        self.closed = False

    async def stream(self, request: GenerationRequest):
        try:
            for piece in self.pieces:
                self.yielded += 1
                yield piece
        finally:
            self.closed = True


def unit(*values: float) -> list[float]:
    """Normalize a vector (test helper)."""
    norm = sum(v * v for v in values) ** 0.5
    return [v / norm for v in values]


def make_embedded_chunk(
    chunk_id: str,
    vector: list[float],
    category: Category = Category.ABOUT,
    text: str | None = None,
) -> EmbeddedChunk:
    """Build a stored-ready chunk with the given vector."""
    document_id = chunk_id.split("-chunk-")[0]
    return EmbeddedChunk(
        id=chunk_id,
        document_id=document_id,
        ordinal=0,
        text=text or f"Text of {chunk_id}",
        token_count=4,
        category=category,
        title=f"Title {chunk_id}",
        metadata=DocumentMetadata(source=f"tests#{chunk_id}"),
        vector=vector,
    )


@pytest.fixture
def small_facts() -> PortfolioFacts:
    """Portfolio with a single priced service plan, one skill and contact details."""
    return PortfolioFacts(
        profile=Profile(
            name="Test Owner",
            role="Engineer",
            location="Nowhere",
            summary="Builds things carefully.",
            specializations=["Backend systems"],
            availability="Open",
            background="Long background in software.",
        ),
        stack=[
            StackItem(
                id=1,
                title="Next.js",
                description="Full-Stack React Framework",
                link="https://nextjs.org/",
            ),
        ],
        service_plans=[
            ServicePlan(
                id=1,
                service="MERN Stack Development",
                price="$30",
                description="Building scalable web applications.",
                completed_works="50+",
                experience="5+ years",
                total_hours_worked="1500+ hours",
                link="https://example.com/book",
            ),
        ],
        contact=ContactDetails(
            name="Test Owner",
            email="owner@example.com",
            phone="+1 555 0100",
            freelance_platforms={"Upwork": "https://example.com/upwork"},
            social={"GitHub": "test-owner"},
            scheduling="Book a call online.",
            business_location="Remote",
            availability="Weekdays",
            how_to_hire="Send an email with the details.",
        ),
    )


@pytest.fixture
def keyword_embedding() -> KeywordEmbeddingFunction:
    return KeywordEmbeddingFunction()


@pytest.fixture
def whitespace_tokenizer() -> WhitespaceTokenizer:
    return WhitespaceTokenizer()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings for an in-memory store with the FAISS index under tmp_path.

    Returns:
        Settings: Template-only generation without word delay
    """
    return Settings(
        database=DatabaseSettings(database_url="sqlite+aiosqlite:///:memory:"),
        vector_store=VectorStoreSettings(search_backend="faiss", index_dir=str(tmp_path / "index")),
        generation=GenerationSettings(backend="template", template_word_delay_seconds=0),
        safety=SafetySettings(),
    )


@pytest.fixture
async def vector_store(tmp_path: Path):
    """
    Connected in-memory vector store of dimension 3 using the FAISS strategy.

    Yields:
        VectorStore: Store closed after the test
    """
    store = VectorStore(
        db_settings=DatabaseSettings(database_url="sqlite+aiosqlite:///:memory:"),
        vector_settings=VectorStoreSettings(search_backend="faiss", index_dir=str(tmp_path / "index")),
        dimension=3,
    )
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
def app_context(
    test_settings: Settings,
    small_facts: PortfolioFacts,
    keyword_embedding: KeywordEmbeddingFunction,
    whitespace_tokenizer: WhitespaceTokenizer,
) -> AppContext:
    """Application context wired with the deterministic fakes."""
    return AppContext(
        test_settings,
        facts=small_facts,
        embedding_function=keyword_embedding,
        tokenizer=whitespace_tokenizer,
    )
