"""Example prompts."""

from __future__ import annotations

from ..mcp.models import GetPromptResult, PromptArgument, PromptDescriptor, PromptMessage, TextContent
from ..protocol.dispatch import HandlerContext


class GreetingPrompt:
    descriptor = PromptDescriptor(
        name="greeting",
        description="Generate a personalized greeting",
        arguments=[PromptArgument(name="name", description="Name of the person to greet", required=True)],
    )

    async def render(self, arguments: dict[str, str], context: HandlerContext) -> GetPromptResult:
        name = arguments["name"]
        return GetPromptResult(
            description="A personalized greeting",
            messages=[
                PromptMessage(
                    role="user",
                    content=TextContent(text=f"Hello, {name}! Welcome to our MCP server."),
                )
            ],
        )


class CodeReviewPrompt:
    descriptor = PromptDescriptor(
        name="code_review",
        description="Generate a code review prompt",
        arguments=[PromptArgument(name="language", description="Programming language", required=True)],
    )

    async def render(self, arguments: dict[str, str], context: HandlerContext) -> GetPromptResult:
        language = arguments["language"]
        text = (
            f"Please review the following {language} code for:\n"
            "1. Best practices\n"
            "2. Security issues\n"
            "3. Performance concerns\n"
            "4. Code style"
        )
        return GetPromptResult(
            description="Code review guidelines",
            messages=[PromptMessage(role="user", content=TextContent(text=text))],
        )
