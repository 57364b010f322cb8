"""
Chat-completion client and prompt builders.

Talks to any OpenAI-compatible `/chat/completions` endpoint (Groq,
OpenRouter, ...) using httpx. Paper context is turned into a system
message so the model answers only from the papers of a list.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

import httpx

from .models import ChatMessage, ChatRole, PaperRecord

logger = logging.getLogger("paper-shelf-server")

NO_ANSWER = "I don't have enough information from the selected papers."
REVIEW_ABSTRACT_LENGTH = 500

CONTEXT_INSTRUCTIONS = (
    "You are a helpful academic assistant. Answer questions only using the "
    "paper summaries and abstracts provided below. Do not use any outside "
    f"information. If the answer is not found in these papers, reply '{NO_ANSWER}'"
)

REVIEW_SYSTEM_PROMPT = (
    "You are an expert academic researcher who writes comprehensive literature "
    "reviews. Focus on synthesis, critical analysis, and identifying research gaps."
)

SUMMARY_SYSTEM_PROMPT = (
    "You are an expert academic researcher who creates comprehensive yet concise "
    "summaries of research papers. Focus on clarity and academic relevance."
)


class ChatCompletionError(RuntimeError):
    """The chat-completion API failed or returned no usable answer."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _paper_block(index: int, paper: PaperRecord) -> str:
    """Describe one paper for the system prompt."""
    lines = [
        f"{index}. Title: {paper.title}",
        f"   Authors: {', '.join(paper.authors) or 'Unknown'}",
    ]
    if paper.publication_year is not None:
        lines.append(f"   Year: {paper.publication_year}")
    if paper.journal:
        lines.append(f"   Journal: {paper.journal}")
    lines.append(f"   Abstract: {paper.abstract or 'No abstract available'}")

    summary = getattr(paper, "summary", None)
    if summary:
        lines.append(f"   Summary: {json.dumps(summary)}")

    return "\n".join(lines)


def build_paper_context(papers: Sequence[PaperRecord]) -> str:
    """Build the system prompt restricting answers to the given papers."""
    blocks = "\n\n".join(_paper_block(i, paper) for i, paper in enumerate(papers, 1))
    return f"{CONTEXT_INSTRUCTIONS}\n\nPapers available for context:\n\n{blocks}"


def build_literature_review_messages(
    list_name: str,
    papers: Sequence[PaperRecord],
) -> list[ChatMessage]:
    """Messages asking for a structured literature review of a list."""
    entries = []
    for i, paper in enumerate(papers, 1):
        abstract = (paper.abstract or "")[:REVIEW_ABSTRACT_LENGTH] or "No abstract available"
        entries.append(
            "\n".join([
                f"{i}. {paper.title}",
                f"Authors: {', '.join(paper.authors)}",
                f"Year: {paper.publication_year or 'N/A'}",
                f"Journal: {paper.journal or 'N/A'}",
                f"Abstract: {abstract}",
            ])
        )

    prompt = "\n".join([
        f"Generate a comprehensive literature review for the following {len(papers)} "
        f'papers on the topic "{list_name}".',
        "",
        "Structure the review with:",
        "1. Introduction and background",
        "2. Key themes and findings",
        "3. Methodological approaches",
        "4. Gaps and future research directions",
        "5. Conclusion",
        "",
        "Papers to review:",
        "",
        "\n\n".join(entries),
        "",
        "Write a professional, academic literature review that synthesizes these "
        "papers into a coherent narrative.",
    ])

    return [
        ChatMessage(role=ChatRole.SYSTEM, content=REVIEW_SYSTEM_PROMPT),
        ChatMessage(role=ChatRole.USER, content=prompt),
    ]


def build_summary_messages(paper: PaperRecord) -> list[ChatMessage]:
    """Messages asking for a structured summary of one paper."""
    prompt = "\n".join([
        "Please provide a comprehensive summary of this research paper:",
        "",
        f"Title: {paper.title}",
        f"Authors: {', '.join(paper.authors) or 'Unknown'}",
        f"Year: {paper.publication_year or 'N/A'}",
        f"Journal: {paper.journal or 'N/A'}",
        f"Abstract: {paper.abstract or 'No abstract available'}",
        "",
        "Please structure your summary with:",
        "1. Main research question or objective",
        "2. Methodology",
        "3. Key findings",
        "4. Significance and implications",
        "5. Limitations",
        "",
        "Keep the summary concise but comprehensive, suitable for academic reference.",
    ])

    return [
        ChatMessage(role=ChatRole.SYSTEM, content=SUMMARY_SYSTEM_PROMPT),
        ChatMessage(role=ChatRole.USER, content=prompt),
    ]


class ChatCompletionClient:
    """
    Async client for an OpenAI-compatible chat-completion API.

    Example usage:
        client = ChatCompletionClient(api_key="...")
        reply = await client.complete(
            [ChatMessage(role=ChatRole.USER, content="What do these papers study?")],
            papers=saved_papers,
        )
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://api.groq.com/openai/v1",
        model: str = "llama3-8b-8192",
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: int = 60,
    ):
        """
        Initialize the chat client.

        Args:
            api_key: Bearer token for the API.
            base_url: API base URL (the part before /chat/completions).
            model: Model name.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens in the reply.
            timeout: Request timeout in seconds.
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
            )
        return self._client

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the most useful error message from a failed response."""
        fallback = f"Chat API error: {response.status_code}"
        text = response.text
        try:
            data = response.json()
        except ValueError:
            return text or fallback

        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if isinstance(error, str) and error:
            return error
        return text or fallback

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        papers: Optional[Sequence[PaperRecord]] = None,
    ) -> str:
        """
        Get a single completion.

        Args:
            messages: Conversation so far, oldest first.
            papers: Optional papers to ground the answer in. When given,
                    a system message with their details is prepended.

        Returns:
            The assistant's reply text.

        Raises:
            ChatCompletionError: On transport errors, non-2xx responses,
                                 or a response without a reply.
        """
        client = await self._get_client()

        api_messages: list[dict[str, Any]] = []
        if papers is not None:
            api_messages.append({"role": "system", "content": build_paper_context(papers)})
        api_messages.extend(message.to_api() for message in messages)

        payload = {
            "model": self.model,
            "messages": api_messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        try:
            response = await client.post("/chat/completions", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Chat request failed: {e}")
            raise ChatCompletionError(f"Chat request failed: {e}") from e

        if response.is_error:
            message = self._error_message(response)
            logger.error(f"Chat API error {response.status_code}: {message}")
            raise ChatCompletionError(message, status_code=response.status_code)

        try:
            return response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ChatCompletionError("Chat API returned no reply") from e

    async def close(self) -> None:
        """Close the client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

