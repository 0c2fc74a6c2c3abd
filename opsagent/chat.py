"""Conversational handlers that read and extend the fact memory."""

from __future__ import annotations

import contextlib
import json
from typing import Callable, TextIO

from opsagent.llm import LLMError, ask_llm
from opsagent.memory import save_memory

DEFAULT_MEMORY_FILE = "memory.txt"
PERSONAL_MEMORY_FILE = "personalMemory.txt"

_NOT_IN_MEMORY = "🤔 I don’t have this information in memory. Let’s add it!"


class UpdateError(Exception):
    """Raised when a fact in memory cannot be updated."""


def _read_line(reader: TextIO) -> str:
    return reader.readline().strip()


def _base_name(path: str) -> str:
    """Last element of a slash-separated path, ignoring trailing slashes."""
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def _non_blank_lines(text: str) -> list[str]:
    return [stripped for line in text.split("\n") if (stripped := line.strip())]


def handle_question(
    text: str,
    memory: list[str],
    reader: TextIO,
    llm: Callable[[str], str] = ask_llm,
    memory_file: str = DEFAULT_MEMORY_FILE,
) -> str | None:
    """Answer ``text`` from memory, asking the user to complete an unfinished fact.

    Returns the answer, or the new fact when one was completed; None if the
    model could not be reached. ``memory`` itself is left unchanged.
    """
    joined = "\n".join(memory)
    prompt = f"""
You are an AI assistant. The user asked: "{text}"

This is currently stored in memory:
{joined}

Answer the question using only the information in memory.

"""
    try:
        response = llm(prompt)
    except LLMError as exc:
        print("❌ Error from AI:", exc)
        return None
    response = response.strip()

    # An answer trailing off with "is" means the value was not in memory.
    if not response.endswith("is"):
        print("✅ Answer from memory:", response)
        return response

    print(_NOT_IN_MEMORY)
    print(">>> Please enter the missing info: ", end="", flush=True)
    new_info = _read_line(reader)

    fact = f"{response} {new_info}"
    print("🧠 Memory updated with:", fact)
    try:
        save_memory(memory_file, [*memory, fact])
    except OSError as exc:
        print("❌ Failed to save memory:", exc)
    return fact


def handle_update(
    text: str,
    memory: list[str],
    llm: Callable[[str], str] = ask_llm,
    memory_file: str = DEFAULT_MEMORY_FILE,
) -> str:
    """Replace the directory fact the user wants changed and return the new value."""
    joined = "\n".join(memory)
    prompt = f"""
You are an AI assistant. The user asked: "{text}"
Here is the current memory:
{joined}

Determine which fact in memory the user wants to update. 
Return a JSON object with two fields:
- "old_fact": the exact string in memory that should be replaced
- "new_fact": the updated version that replaces it, with the new information from the user

Respond only with the JSON. Do not include any explanation.
"""
    try:
        response = llm(prompt)
    except LLMError as exc:
        raise UpdateError(f"error from AI: {exc}") from exc
    print("🤖 AI response:", response)

    try:
        data = json.loads(response)
    except ValueError as exc:
        raise UpdateError(f"failed to parse AI JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise UpdateError("failed to parse AI JSON: expected a JSON object")
    old_fact = data.get("old_fact") or ""
    new_fact = data.get("new_fact") or ""
    if not isinstance(old_fact, str) or not isinstance(new_fact, str):
        raise UpdateError("failed to parse AI JSON: fields must be strings")

    for index, fact in enumerate(memory):
        if old_fact in fact:
            memory[index] = f"The directory of {_base_name(new_fact)} is {new_fact}"
            break
    else:
        raise UpdateError("old fact not found in memory")

    try:
        save_memory(memory_file, memory)
    except OSError as exc:
        raise UpdateError(f"failed to save memory: {exc}") from exc

    print("🧠 Memory updated with new fact:", new_fact)
    return new_fact


def handle_add(
    text: str,
    memory: list[str],
    llm: Callable[[str], str] = ask_llm,
    memory_file: str = DEFAULT_MEMORY_FILE,
) -> list[str]:
    """Extract facts from ``text``, append them to ``memory`` and return them."""
    prompt = f"""
You are an AI assistant that extracts facts from user input.
Extract all useful facts as natural language sentences, one per line.
You are working on Mac/Linux operating system.
If nothing useful, return an empty string.

User input:
{text}

Example output:
Ip of Revoland ec2 instance is 123.123.123.123
The directory of Linux folder is /Users/sewn/Linux
"""
    try:
        response = llm(prompt)
    except LLMError as exc:
        print("Error extracting info:", exc)
        return []

    added = _non_blank_lines(response)
    for line in added:
        memory.append(line)
        print("Memory updated:", line)

    if added:
        with contextlib.suppress(OSError):
            save_memory(memory_file, memory)
    else:
        print("Nothing useful to store.")
    return added


def handle_personal_information_add(
    text: str,
    memory: list[str],
    llm: Callable[[str], str] = ask_llm,
    memory_file: str = PERSONAL_MEMORY_FILE,
) -> list[str]:
    """Extract personal facts from ``text``, append them and return them."""
    prompt = f"""
You are an AI assistant that extracts personal information from user input.
Extract all useful personal information as natural language sentences, one per line.
User input:
{text}
Example output:
User's name is John Doe 
User's email is [email] 
"""
    try:
        response = llm(prompt)
    except LLMError as exc:
        print("Error extracting personal info:", exc)
        return []

    added = _non_blank_lines(response)
    for line in added:
        memory.append(line)
        print("Memory updated with personal info:", line)

    if not added:
        print("No useful personal information found.")
        return added
    try:
        save_memory(memory_file, memory)
    except OSError as exc:
        print("❌ Failed to save personal information to memory:", exc)
    else:
        print("✅ Personal information saved successfully.")
    return added


def handle_personal_information_question(
    text: str,
    memory: list[str],
    reader: TextIO,
    llm: Callable[[str], str] = ask_llm,
    memory_file: str = DEFAULT_MEMORY_FILE,
) -> str | None:
    """Answer a personal question, or ask the user and store the answer as a fact.

    Returns the answer or the stored fact, or None when nothing was obtained.
    ``memory`` itself is left unchanged.
    """
    joined = "\n".join(memory)
    prompt = f"""
You are an AI assistant. The user asked: "{text}"
This is the personal information stored in memory:
{joined}
Answer the question using only the information in memory. If the answer is not available, respond with: "NOT_FOUND".
"""
    try:
        response = llm(prompt)
    except LLMError as exc:
        print("❌ Error from AI:", exc)
        return None
    response = response.strip()

    if response.casefold() != "not_found":
        print("✅ Answer from personal information:", response)
        return response

    print(_NOT_IN_MEMORY)
    print(">>> Please enter the missing personal info: ", end="", flush=True)
    new_info = _read_line(reader)

    add_prompt = f"""
You are an AI assistant. The user asked: "{text}"
They responded with: "{new_info}"
Please turn this into a fact in the form: "The <type> is <value>"
Return only the fact sentence.
"""
    try:
        fact = llm(add_prompt)
    except LLMError as exc:
        print("❌ Failed to create memory fact:", exc)
        return None
    fact = fact.strip()
    if not fact:
        print("❌ Could not generate a memory fact.")
        return None

    print("🧠 Personal information memory updated with:", fact)
    try:
        save_memory(memory_file, [*memory, fact])
    except OSError as exc:
        print("❌ Failed to save personal information memory:", exc)
    else:
        print("✅ Personal information memory saved successfully.")
    return fact