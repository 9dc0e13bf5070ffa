"""
Test suite for the content extractor.

Tests document ids, ordering and text of the portfolio fact transforms.

System role: Verification of extraction stage of ingestion
"""

from portfolio_chat.core.content.extractor import ContentExtractor
from portfolio_chat.core.content.facts import DEFAULT_FACTS
from portfolio_chat.models.content import Category


class TestContentExtractor:
    """Test suite for ContentExtractor."""

    def test_extract_should_be_deterministic(self) -> None:
        """Test two runs produce identical documents."""
        # Act
        first = ContentExtractor().extract()
        second = ContentExtractor().extract()

        # Assert
        assert [d.model_dump() for d in first] == [d.model_dump() for d in second]

    def test_extract_should_produce_unique_ids(self) -> None:
        """Test no two documents share an id."""
        # Act
        ids = [d.id for d in ContentExtractor().extract()]

        # Assert
        assert len(ids) == len(set(ids))

    def test_extract_should_cover_every_fact(self) -> None:
        """Test one document per fact entry plus about, statistics and contact."""
        # Act
        documents = ContentExtractor(DEFAULT_FACTS).extract()

        # Assert
        expected = (
            1
            + len(DEFAULT_FACTS.experience)
            + len(DEFAULT_FACTS.services)
            + len(DEFAULT_FACTS.service_plans)
            + len(DEFAULT_FACTS.showcases)
            + len(DEFAULT_FACTS.stack)
            + len(DEFAULT_FACTS.testimonials)
            + len(DEFAULT_FACTS.faq)
            + 1
            + 1
        )
        assert len(documents) == expected
        assert documents[0].id == "about-main"
        assert documents[-1].id == "contact-info"

    def test_service_plan_should_state_hourly_price(self) -> None:
        """Test service plan documents carry the displayed price."""
        # Act
        documents = {d.id: d for d in ContentExtractor().extract()}

        # Assert
        plan = documents["service-plan-1"]
        assert plan.category == Category.SERVICES
        assert "Service: MERN Stack Development" in plan.text
        assert "Price: $30 per hour" in plan.text

    def test_documents_should_record_source_anchor(self) -> None:
        """Test metadata points back to the fact family."""
        # Act
        documents = {d.id: d for d in ContentExtractor().extract()}

        # Assert
        assert documents["contact-info"].metadata.source.endswith("#contact")
        assert "contact@aasimshah.com" in documents["contact-info"].metadata.entities
        assert "hire" in documents["contact-info"].metadata.keywords

    def test_optional_families_should_be_skipped_when_empty(self, small_facts) -> None:
        """Test statistics are omitted when the portfolio has none."""
        # Act
        ids = [d.id for d in ContentExtractor(small_facts).extract()]

        # Assert
        assert ids == ["about-main", "service-plan-1", "skill-1", "contact-info"]
