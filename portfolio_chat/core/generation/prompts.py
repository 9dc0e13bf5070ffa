"""
Grounded answer prompt.

System instruction, retrieved context, prior turns and the visitor question
assembled into a LangChain chat prompt.

Dependencies: langchain_core
System role: Prompt construction for the generative backend
"""

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from portfolio_chat.models.chat import ChatMessage, ChatRole
from portfolio_chat.models.search import SearchResult

SYSTEM_PROMPT = """You are a helpful assistant for Syed Aasim Shah's portfolio website.
Your ONLY purpose is to answer questions about:
- Aasim's professional experience
- Services offered and their pricing
- Projects and case studies
- Skills and tech stack
- Contact information
- Testimonials and reviews

RULES YOU MUST FOLLOW:

1. ONLY use information from the RETRIEVED CONTEXT in the user's message
2. NEVER use general knowledge about any topic
3. NEVER make assumptions, guesses or invent information that is not explicitly stated
4. If the retrieved context does not contain the answer, say:
   "This information is not available on the website."
5. If asked about topics unrelated to the portfolio, respond:
   "I can only answer questions about Aasim Shah's portfolio, experience, services, and projects."
6. Cite the section when providing information (e.g., "According to the services section...")
7. Refer to Aasim in the third person and address the visitor as "you"
8. Be concise, friendly and use Markdown where it helps readability"""

HUMAN_TEMPLATE = """=== RETRIEVED CONTEXT (Use ONLY this information) ===
{context}
=== END OF CONTEXT ===

User Question: {question}

Answer the question using ONLY the information from the RETRIEVED CONTEXT above."""

RAG_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SYSTEM_PROMPT),
        MessagesPlaceholder(variable_name="history"),
        ("human", HUMAN_TEMPLATE),
    ]
)

NO_CONTEXT = "No relevant context found."


def format_context(results: list[SearchResult]) -> str:
    """
    Render search results as numbered context blocks.

    Each block carries its section and confidence so the model can cite it.
    """
    if not results:
        return NO_CONTEXT
    blocks = []
    for i, result in enumerate(results, start=1):
        blocks.append(
            f"### Result {i} (Confidence: {result.score * 100:.0f}%, Section: {result.category.value})\n"
            f"**Title:** {result.title}\n"
            f"**Source:** {result.metadata.source}\n\n"
            f"{result.text}\n"
            "---"
        )
    return "\n\n".join(blocks)


def to_langchain_history(history: list[ChatMessage]) -> list[BaseMessage]:
    return [
        HumanMessage(content=turn.content) if turn.role == ChatRole.USER else AIMessage(content=turn.content)
        for turn in history
    ]


def build_messages(
    question: str,
    results: list[SearchResult],
    history: list[ChatMessage] | None = None,
) -> list[BaseMessage]:
    """Format the full message list sent to the chat model."""
    return RAG_PROMPT.format_messages(
        history=to_langchain_history(history or []),
        context=format_context(results),
        question=question,
    )
