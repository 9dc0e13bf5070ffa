"""
Template answer backend.

Answers without a language model. An ordered list of (predicate, responder)
routes picks the first route whose keywords appear in the question and whose
category appears among the retrieved results; the responder builds the
answer from those results only. With no matching route the first three
sentences of the retrieved text are returned.

Dependencies: asyncio
System role: Deterministic fallback answer generator
"""

import asyncio
import logging
import re
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass

from portfolio_chat.core.generation.base import GenerationBackend, GenerationRequest
from portfolio_chat.models.content import Category
from portfolio_chat.models.search import SearchResult

logger = logging.getLogger(__name__)

_FIELD_RE = re.compile(r"^\s*(?:-\s*)?([A-Za-z][A-Za-z &/]*):\s*(.+?)\s*$")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_WORD_RE = re.compile(r"[a-z0-9]+")


def parse_fields(text: str) -> dict[str, str]:
    """Read 'Key: value' lines into a dict (first occurrence wins)."""
    fields: dict[str, str] = {}
    for line in text.splitlines():
        match = _FIELD_RE.match(line)
        if match and match.group(1) not in fields:
            fields[match.group(1)] = match.group(2)
    return fields


def remaining_text(text: str, used_keys: set[str]) -> str:
    """Text of the lines not consumed as one of used_keys, whitespace collapsed."""
    kept = []
    for line in text.splitlines():
        match = _FIELD_RE.match(line)
        if match and match.group(1) in used_keys:
            continue
        kept.append(line)
    return " ".join(" ".join(kept).split())


def _bullets(lines: list[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def _dedupe(lines: list[str]) -> list[str]:
    return list(dict.fromkeys(lines))


def _with_details(line: str, detail: str | None, result: SearchResult, used_keys: set[str]) -> str:
    # Unstructured text and later windows of a split document carry their facts outside the known fields
    if detail:
        return f"{line}: {detail}"
    extra = remaining_text(result.text, used_keys)
    return f"{line}: {extra}" if extra else line


def respond_services(results: list[SearchResult]) -> str:
    used = {"Service", "Price", "Description"}
    lines = []
    for result in results:
        fields = parse_fields(result.text)
        name = fields.get("Service", result.title)
        price = fields.get("Price")
        description = fields.get("Description")
        line = f"**{name}**"
        if price:
            line += f" ({price})"
            if not description:
                lines.append(line)
                continue
        lines.append(_with_details(line, description, result, used))
    return (
        "According to the services section, Aasim offers:\n\n"
        + _bullets(_dedupe(lines))
    )


def respond_skills(results: list[SearchResult]) -> str:
    lines = []
    for result in results:
        fields = parse_fields(result.text)
        line = f"**{fields.get('Technology', result.title)}**"
        if "Technology" in fields:
            kind = fields.get("Category")
            lines.append(line + (f" ({kind})" if kind else ""))
        else:
            lines.append(_with_details(line, None, result, {"Technology", "Category"}))
    return "According to the skills section, Aasim works with:\n\n" + _bullets(_dedupe(lines))


def respond_projects(results: list[SearchResult]) -> str:
    lines = []
    for result in results:
        fields = parse_fields(result.text)
        name = fields.get("Project", result.title)
        kind = fields.get("Type")
        line = f"**{name}**" + (f" ({kind})" if kind else "")
        lines.append(_with_details(line, fields.get("Description"), result, {"Project", "Type", "Description"}))
    return "According to the projects section, Aasim has built:\n\n" + _bullets(_dedupe(lines))


def respond_experience(results: list[SearchResult]) -> str:
    lines = []
    for result in results:
        fields = parse_fields(result.text)
        role = fields.get("Role", result.title)
        company = fields.get("Company")
        period = fields.get("Period")
        line = f"**{role}**"
        if company:
            line += f" at {company}"
        if period:
            line += f" ({period})"
        lines.append(
            _with_details(line, fields.get("Description"), result, {"Role", "Company", "Period", "Description"})
        )
    return "According to the experience section:\n\n" + _bullets(_dedupe(lines))


def respond_contact(results: list[SearchResult]) -> str:
    fields: dict[str, str] = {}
    for result in results:
        for key, value in parse_fields(result.text).items():
            fields.setdefault(key, value)
    lines = [
        f"**{key}:** {fields[key]}"
        for key in ("Email", "Phone", "Upwork", "Fiverr", "GitHub", "Availability")
        if key in fields
    ]
    if not lines:
        return "According to the contact section:\n\n" + results[0].text
    return "According to the contact section, you can reach Aasim here:\n\n" + _bullets(lines)


def respond_about(results: list[SearchResult]) -> str:
    return "According to the about section:\n\n" + "\n\n".join(_dedupe([r.text for r in results]))


def respond_testimonials(results: list[SearchResult]) -> str:
    lines = []
    for result in results:
        fields = parse_fields(result.text)
        client = fields.get("Client", result.title)
        location = fields.get("Location")
        line = f"**{client}**" + (f" ({location.rstrip('.')})" if location else "")
        lines.append(_with_details(line, fields.get("Feedback"), result, {"Client", "Location", "Feedback"}))
    return "According to the testimonials section, clients say:\n\n" + _bullets(_dedupe(lines))


def respond_sentences(results: list[SearchResult]) -> str:
    """First three sentences longer than 20 characters from the retrieved text."""
    sentences = [
        sentence.strip()
        for result in results
        for sentence in _SENTENCE_SPLIT_RE.split(" ".join(result.text.split()))
        if len(sentence.strip()) > 20
    ]
    if not sentences:
        return "This information is not available on the website."
    return " ".join(s if s[-1] in ".!?" else s + "." for s in sentences[:3])


@dataclass(frozen=True)
class TemplateRoute:
    """Answer recipe for one kind of question."""

    category: Category
    keywords: frozenset[str]
    responder: Callable[[list[SearchResult]], str]

    def matches(self, question_words: set[str], results: list[SearchResult]) -> list[SearchResult]:
        """Results of this route's category if the question asks for it, else []."""
        if not self.keywords & question_words:
            return []
        return [result for result in results if result.category == self.category]


DEFAULT_ROUTES: list[TemplateRoute] = [
    TemplateRoute(
        Category.SERVICES,
        frozenset({
            "service", "services", "offer", "offers", "charge", "charges", "price", "prices",
            "pricing", "rate", "rates", "cost", "costs", "hourly", "fee", "fees", "pay",
        }),
        respond_services,
    ),
    TemplateRoute(
        Category.SKILLS,
        frozenset({"skill", "skills", "tech", "technology", "technologies", "stack", "know", "expertise"}),
        respond_skills,
    ),
    TemplateRoute(
        Category.PROJECTS,
        frozenset({"project", "projects", "portfolio", "built", "build", "showcase", "work"}),
        respond_projects,
    ),
    TemplateRoute(
        Category.EXPERIENCE,
        frozenset({"experience", "background", "career", "job", "jobs", "worked", "company", "companies"}),
        respond_experience,
    ),
    TemplateRoute(
        Category.CONTACT,
        frozenset({"contact", "email", "phone", "reach", "hire", "available", "availability", "call"}),
        respond_contact,
    ),
    TemplateRoute(
        Category.ABOUT,
        frozenset({"about", "who", "yourself", "introduce", "bio", "clients", "stats"}),
        respond_about,
    ),
    TemplateRoute(
        Category.TESTIMONIALS,
        frozenset({"testimonial", "testimonials", "review", "reviews", "client", "feedback"}),
        respond_testimonials,
    ),
]


class TemplateGenerationBackend(GenerationBackend):
    """Rule-based answers streamed word by word."""

    name = "template"

    def __init__(
        self,
        routes: list[TemplateRoute] | None = None,
        word_delay_seconds: float = 0.02,
    ) -> None:
        self._routes = routes if routes is not None else DEFAULT_ROUTES
        self._word_delay = word_delay_seconds

    def answer(self, request: GenerationRequest) -> str:
        """Build the full answer text."""
        question_words = set(_WORD_RE.findall(request.question.lower()))
        for route in self._routes:
            matched = route.matches(question_words, request.results)
            if matched:
                logger.info(f"{__name__}:answer - Route {route.category.value} matched {len(matched)} results")
                return route.responder(matched)
        logger.info(f"{__name__}:answer - No route matched, using sentence fallback")
        return respond_sentences(request.results)

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        words = self.answer(request).split(" ")
        for i, word in enumerate(words):
            yield word if i == 0 else " " + word
            if self._word_delay > 0:
                await asyncio.sleep(self._word_delay)
