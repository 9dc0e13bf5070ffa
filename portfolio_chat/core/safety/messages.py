"""
Canned user-facing messages.

Every reply that does not come from a generative or template answer is
taken from here, so no backend detail ever reaches the client.

Dependencies: None
System role: Fallback texts for refusals and errors
"""

from enum import Enum

CONTACT_EMAIL = "contact@aasimshah.com"


class FallbackType(str, Enum):
    NO_RESULTS = "NO_RESULTS"
    LOW_CONFIDENCE = "LOW_CONFIDENCE"
    OUT_OF_SCOPE = "OUT_OF_SCOPE"
    RATE_LIMITED = "RATE_LIMITED"
    ERROR = "ERROR"
    INVALID_INPUT = "INVALID_INPUT"


FALLBACK_RESPONSES: dict[FallbackType, str] = {
    FallbackType.NO_RESULTS: (
        "I don't have enough details about that specific query in the portfolio. "
        "However, I'd be happy to help with questions about:\n\n"
        "- **Services** - What Aasim offers and pricing\n"
        "- **Experience** - Work history and background\n"
        "- **Projects** - Featured work and case studies\n"
        "- **Skills** - Technologies and expertise\n"
        "- **Contact** - How to reach out\n\n"
        f"For anything else, feel free to reach out to Aasim directly at **{CONTACT_EMAIL}**. "
        "He responds within 24-48 hours.\n\n"
        "What would you like to know?"
    ),
    FallbackType.LOW_CONFIDENCE: (
        "I found some potentially related information, but I'm not confident enough to "
        "provide an accurate answer. For precise information, please contact Aasim Shah "
        f"directly via email at **{CONTACT_EMAIL}**.\n\n"
        "Is there something else I can help you with?"
    ),
    FallbackType.OUT_OF_SCOPE: (
        "I can only answer questions about Aasim Shah's portfolio, including:\n\n"
        "- Professional experience and work history\n"
        "- Services offered (MERN Stack Development, API Development, Cloud & DevOps, "
        "Complete Project Development)\n"
        "- Projects and case studies\n"
        "- Skills and tech stack\n"
        "- Contact information and availability\n\n"
        f"For other inquiries, please contact Aasim directly at **{CONTACT_EMAIL}**."
    ),
    FallbackType.RATE_LIMITED: (
        "You've sent too many messages. Please wait a moment before trying again. "
        "This helps ensure a good experience for everyone."
    ),
    FallbackType.ERROR: (
        "I apologize, but I encountered an issue processing your request. Please try again "
        "in a moment. If the problem persists, you can reach Aasim directly at "
        f"**{CONTACT_EMAIL}**."
    ),
    FallbackType.INVALID_INPUT: (
        "I couldn't process that message. Please try rephrasing your question about "
        "Aasim's portfolio, experience, or services."
    ),
}


def get_fallback_response(fallback_type: FallbackType) -> str:
    return FALLBACK_RESPONSES[fallback_type]
