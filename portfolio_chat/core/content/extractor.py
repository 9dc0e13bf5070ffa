"""
Content extractor.

Transforms structured portfolio facts into self-contained Documents, one
transform per fact family. Output order and document ids are stable across
runs so re-ingestion replaces records one for one.

Dependencies: portfolio_chat.models
System role: First stage of the ingestion pipeline
"""

import logging
from collections.abc import Callable

from portfolio_chat.core.content.facts import DEFAULT_FACTS, PortfolioFacts
from portfolio_chat.models.content import Category, Document, DocumentMetadata

logger = logging.getLogger(__name__)

FACTS_SOURCE = "portfolio_chat/core/content/facts.py"


def _lines(*parts: str) -> str:
    return "\n".join(parts).strip()


def _metadata(anchor: str, entities: list[str], keywords: list[str]) -> DocumentMetadata:
    return DocumentMetadata(
        source=f"{FACTS_SOURCE}#{anchor}",
        entities=frozenset(e for e in entities if e),
        keywords=frozenset(k.lower() for k in keywords if k),
    )


class ContentExtractor:
    """
    Extract documents from a PortfolioFacts instance.

    Each fact family has a dedicated transform; extract() concatenates them in
    a fixed order. Pure: no I/O, no randomness.
    """

    def __init__(self, facts: PortfolioFacts | None = None) -> None:
        self._facts = facts or DEFAULT_FACTS
        self._transforms: list[Callable[[], list[Document]]] = [
            self._extract_about,
            self._extract_experience,
            self._extract_services,
            self._extract_service_plans,
            self._extract_projects,
            self._extract_skills,
            self._extract_testimonials,
            self._extract_faq,
            self._extract_statistics,
            self._extract_contact,
        ]

    def extract(self) -> list[Document]:
        """
        Run every transform and return documents in stable order.

        Returns:
            list[Document]: Extracted documents

        Raises:
            ValueError: If two transforms produce the same document id
        """
        documents: list[Document] = []
        for transform in self._transforms:
            documents.extend(transform())

        seen: set[str] = set()
        for document in documents:
            if document.id in seen:
                raise ValueError(f"Duplicate document id: {document.id}")
            seen.add(document.id)

        logger.info(f"{__name__}:extract - Extracted {len(documents)} documents")
        return documents

    def _extract_about(self) -> list[Document]:
        profile = self._facts.profile
        stats = [f"- {stat.title}: {stat.value}+" for stat in self._facts.statistics]
        text = _lines(
            f"Name: {profile.name}",
            f"Role: {profile.role}",
            f"Location: {profile.location}",
            "",
            "Professional Summary:",
            profile.summary,
            "",
            "Specialization:",
            *[f"- {item}" for item in profile.specializations],
            "",
            *(["Key Statistics:", *stats, ""] if stats else []),
            f"Availability: {profile.availability}",
            "",
            "Education & Background:",
            profile.background,
        )
        return [
            Document(
                id="about-main",
                category=Category.ABOUT,
                title=f"About {profile.name}",
                text=text,
                metadata=_metadata(
                    "profile",
                    [profile.name, *profile.aliases],
                    ["about", "developer", "mern", "fullstack", "senior", "profile", "bio"],
                ),
            )
        ]

    def _extract_experience(self) -> list[Document]:
        return [
            Document(
                id=f"experience-{entry.id}",
                category=Category.EXPERIENCE,
                title=entry.title,
                text=_lines(
                    f"Role: {entry.title}",
                    f"Company: {entry.company} ({entry.label})",
                    f"Period: {entry.period}",
                    f"Description: {entry.description}",
                    f"Company Website: {entry.link or 'Not available'}",
                ),
                metadata=_metadata(
                    "experience",
                    [entry.company, entry.title],
                    ["experience", "work", "job", entry.company, entry.title],
                ),
            )
            for entry in self._facts.experience
        ]

    def _extract_services(self) -> list[Document]:
        return [
            Document(
                id=f"service-{service.id}",
                category=Category.SERVICES,
                title=service.title,
                text=_lines(
                    f"Service: {service.title}",
                    f"Description: {service.description}",
                ),
                metadata=_metadata(
                    "services",
                    [service.title],
                    ["service", "offer", "provide", service.title],
                ),
            )
            for service in self._facts.services
        ]

    def _extract_service_plans(self) -> list[Document]:
        return [
            Document(
                id=f"service-plan-{plan.id}",
                category=Category.SERVICES,
                title=plan.service,
                text=_lines(
                    f"Service: {plan.service}",
                    f"Price: {plan.price} per hour",
                    f"Description: {plan.description}",
                    f"Completed Works: {plan.completed_works}",
                    f"Experience: {plan.experience}",
                    f"Total Hours Worked: {plan.total_hours_worked}",
                    f"Booking Link: {plan.link}",
                ),
                metadata=_metadata(
                    "service_plans",
                    [plan.service],
                    ["price", "rate", "cost", "hire", "hourly", plan.service],
                ),
            )
            for plan in self._facts.service_plans
        ]

    def _extract_projects(self) -> list[Document]:
        return [
            Document(
                id=f"project-{project.id}",
                category=Category.PROJECTS,
                title=project.title,
                text=_lines(
                    f"Project: {project.title}",
                    f"Description: {project.description}",
                    f"Type: {project.type}",
                    f"Theme: {project.theme}",
                    f"Pages: {project.pages}",
                    f"Link: {project.link}",
                ),
                metadata=_metadata(
                    "showcases",
                    [project.title, project.type],
                    ["project", "portfolio", "work", "showcase", project.title],
                ),
            )
            for project in self._facts.showcases
        ]

    def _extract_skills(self) -> list[Document]:
        return [
            Document(
                id=f"skill-{item.id}",
                category=Category.SKILLS,
                title=item.title,
                text=_lines(
                    f"Technology: {item.title}",
                    f"Category: {item.description}",
                    f"Documentation: {item.link}",
                ),
                metadata=_metadata(
                    "stack",
                    [item.title],
                    ["skill", "technology", "stack", "expertise", item.title],
                ),
            )
            for item in self._facts.stack
        ]

    def _extract_testimonials(self) -> list[Document]:
        return [
            Document(
                id=f"testimonial-{testimonial.id}",
                category=Category.TESTIMONIALS,
                title=f"Testimonial from {testimonial.name}",
                text=_lines(
                    f"Client: {testimonial.name}",
                    f"Location: {testimonial.location}",
                    f'Feedback: "{testimonial.feedback}"',
                ),
                metadata=_metadata(
                    "testimonials",
                    [testimonial.name],
                    ["testimonial", "review", "feedback", "client", "recommendation"],
                ),
            )
            for testimonial in self._facts.testimonials
        ]

    def _extract_faq(self) -> list[Document]:
        return [
            Document(
                id=f"faq-{index}",
                category=Category.FAQ,
                title=entry.question,
                text=_lines(
                    f"Question: {entry.question}",
                    f"Answer: {entry.answer}",
                ),
                metadata=_metadata(
                    "faq",
                    [],
                    ["faq", "question", "answer", "help", "support"],
                ),
            )
            for index, entry in enumerate(self._facts.faq)
        ]

    def _extract_statistics(self) -> list[Document]:
        if not self._facts.statistics:
            return []
        return [
            Document(
                id="stats-overview",
                category=Category.ABOUT,
                title="Portfolio Statistics",
                text=_lines(
                    "Portfolio Statistics and Achievements:",
                    *[f"{stat.title}: {stat.value}" for stat in self._facts.statistics],
                ),
                metadata=_metadata(
                    "statistics",
                    [],
                    ["stats", "numbers", "clients", "experience", "projects", "achievements"],
                ),
            )
        ]

    def _extract_contact(self) -> list[Document]:
        contact = self._facts.contact
        if contact is None:
            return []
        text = _lines(
            f"Contact {contact.name}:",
            "",
            f"Email: {contact.email}",
            f"Phone: {contact.phone}",
            "",
            "Freelance Platforms:",
            *[f"- {name}: {link}" for name, link in contact.freelance_platforms.items()],
            "",
            "Social Media:",
            *[f"- {name}: {handle}" for name, handle in contact.social.items()],
            "",
            "Schedule a Meeting:",
            contact.scheduling,
            "",
            "Business Location:",
            contact.business_location,
            "",
            f"Availability: {contact.availability}",
            "",
            "How to Hire:",
            contact.how_to_hire,
        )
        return [
            Document(
                id="contact-info",
                category=Category.CONTACT,
                title="Contact Information",
                text=text,
                metadata=_metadata(
                    "contact",
                    [contact.email, contact.name],
                    ["contact", "email", "phone", "hire", "reach", "schedule", "call", "meeting"],
                ),
            )
        ]
