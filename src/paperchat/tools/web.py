"""
Web search tool.

Searches the web, then asks the model again (without tools) to answer the
user's question from the search results, streaming that answer into the
tool's message.
"""

from pydantic import BaseModel, Field

from ..core.streaming import StreamableText
from ..integrations.web_search import WebSearchClient, format_results_for_prompt
from ..llm.client import TextDelta
from ..models.messages import to_llm_messages
from ..models.ui import ToolMessage
from ..utils.logging import get_logger
from .registry import ToolContext, ToolRegistry

logger = get_logger(__name__)

ANSWER_INSTRUCTIONS = (
    "Answer the user's question using the web results below. "
    "Cite sources by their number in square brackets, e.g. [1]. "
    "If the results do not contain the answer, say so."
)


class WebSearchArgs(BaseModel):
    query: str = Field(..., description="The user's question, restated as a full query")
    concised_query: str = Field(..., description="A short keyword version of the query for a search engine")


def build_answer_messages(ctx: ToolContext, query: str, results_text: str) -> list[dict]:
    messages = []
    if ctx.system_prompt:
        messages.append({"role": "system", "content": ctx.system_prompt})
    messages.extend(to_llm_messages(ctx.state.get().messages))
    messages.append(
        {
            "role": "system",
            "content": f"{ANSWER_INSTRUCTIONS}\n\nQuestion: {query}\n\nWeb results:\n{results_text}",
        }
    )
    return messages


def register_web_tools(registry: ToolRegistry, search: WebSearchClient) -> None:

    @registry.tool(
        "search_web",
        "Search the web for recent or factual information the model does not know.",
        WebSearchArgs,
    )
    async def search_web(args: WebSearchArgs, ctx: ToolContext):
        yield ToolMessage(content="Searching the web...", concised_query=args.concised_query)

        results = await search.search(args.concised_query)

        answer = StreamableText()
        message = ToolMessage(content=answer, concised_query=args.concised_query)
        yield message

        # Second pass without tools so the model cannot recurse into another search
        async for event in ctx.llm.stream_chat(
            messages=build_answer_messages(ctx, args.query, format_results_for_prompt(results)),
            model=ctx.model,
        ):
            if isinstance(event, TextDelta):
                answer.update(event.delta)
        answer.done()

        logger.info("web_answer_streamed", query=args.concised_query, results=len(results), chars=len(answer.text))

        ctx.record(
            "search_web",
            args.model_dump(),
            {
                "query": args.query,
                "concised_query": args.concised_query,
                "results": [result.model_dump() for result in results],
                "answer": answer.text,
            },
        )
        yield message

    @registry.renderer("search_web")
    def render_search_web(result):
        return ToolMessage(content=result.get("answer", ""), concised_query=result.get("concised_query", ""))
