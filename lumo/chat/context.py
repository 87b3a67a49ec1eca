"""
Prompt assembly for the chat proxy.

Turns the persona, uploaded files and recent history into the role-tagged
message list sent to the chat-completion endpoint.
"""

from collections.abc import Sequence

from lumo.files.extractors import IMAGE_ANALYSIS_MARKER, IMAGE_HINT_MARKER
from lumo.llm import LLMMessage
from lumo.models.chat import FileContext, Message
from lumo.personas import Persona
from lumo.prompts import PromptLoader

SYSTEM_PROMPT = "chat/system.md"
BASE64_MARKER = "Base64 data:"
TRUNCATION_SUFFIX = "...[content truncated]"


def _file_body(file: FileContext, max_chars: int) -> str:
    if file.file_type.startswith("image/"):
        if IMAGE_ANALYSIS_MARKER in file.content:
            start = file.content.find(IMAGE_ANALYSIS_MARKER)
            end = file.content.find(IMAGE_HINT_MARKER)
            if end > start:
                analysis = file.content[start:end].strip()
                return f"Image: {file.file_name}\n{analysis}\n"
            return f"Image file: {file.file_name} (analyzed)\n"
        return (
            f"Image file uploaded: {file.file_name}\n"
            f"File type: {file.file_type}\n"
            "Note: Image analysis available - user can ask about image content.\n"
        )
    if BASE64_MARKER in file.content:
        return f"{file.content.split(BASE64_MARKER)[0]}\n"
    content = file.content
    if len(content) > max_chars:
        content = content[:max_chars] + TRUNCATION_SUFFIX
    return f"{content}\n"


def build_file_context(files: Sequence[FileContext], max_chars: int = 2000) -> str:
    """Render uploaded files as delimited context blocks ("" when none)."""
    blocks = []
    for index, file in enumerate(files, start=1):
        blocks.append(
            f"\n--- File {index}: {file.file_name} ({file.file_type}) ---\n"
            f"{_file_body(file, max_chars)}"
            f"--- End of {file.file_name} ---\n"
        )
    return "".join(blocks)


def build_system_prompt(
    persona: Persona,
    file_context: str,
    prompts: PromptLoader | None = None,
) -> str:
    loader = prompts or PromptLoader()
    return loader.render(
        SYSTEM_PROMPT,
        persona_prompt=persona.system_prompt,
        file_context=file_context,
    )


def build_messages(
    message: str,
    history: Sequence[Message],
    files: Sequence[FileContext],
    persona: Persona,
    history_limit: int = 10,
    max_file_chars: int = 2000,
    prompts: PromptLoader | None = None,
) -> list[LLMMessage]:
    """
    Build the provider message list.

    The system message carries the persona prompt and file context, followed
    by the last history_limit history messages and the current user message.
    A trailing history entry identical to the current message is dropped so
    the message is not sent twice.
    """
    turns = list(history)
    if turns and turns[-1].role == "user" and turns[-1].content == message:
        turns.pop()
    recent = turns[-history_limit:] if history_limit > 0 else []

    system_prompt = build_system_prompt(
        persona, build_file_context(files, max_file_chars), prompts
    )
    messages = [LLMMessage(role="system", content=system_prompt)]
    messages.extend(
        LLMMessage(role=turn.role, content=turn.content)
        for turn in recent
        if turn.content.strip()
    )
    messages.append(LLMMessage(role="user", content=message))
    return messages
