"""Fact memory stored as plain text, one fact per line."""

from __future__ import annotations

from typing import Callable, Iterable

from opsagent.llm import ask_llm

_MERGE_INSTRUCTIONS = (
    "Your task is to help the user keep a memory of facts.",
    "Combine the question and the answer below into one sentence stating a fact.",
    "Sample sentences:",
    '"The SSH username of Orion is ubuntu"',
    '"The IP of the staging server is 10.1.2.3"',
    '"The directory of Projects folder is /home/demo/Projects"',
    "Reply with that sentence alone and nothing else.",
)


def load_memory(filename: str) -> list[str]:
    """Return the non-blank, stripped lines of ``filename``."""
    with open(filename, encoding="utf-8") as handle:
        return [stripped for line in handle if (stripped := line.strip())]


def save_memory(filename: str, memory: Iterable[str]) -> None:
    """Write every fact in ``memory`` to ``filename``, one per line."""
    with open(filename, "w", encoding="utf-8") as handle:
        handle.writelines(f"{line}\n" for line in memory)


def prompt_to_memory(
    question: str, answer: str, llm: Callable[[str], str] = ask_llm
) -> str:
    """Ask the model to merge a question and its answer into one fact sentence."""
    header, combine, *rest = _MERGE_INSTRUCTIONS
    prompt = "\n".join(
        [
            header,
            f'Question: "{question}"',
            f'Answer: "{answer}"',
            combine,
            *rest,
        ]
    )
    return llm(prompt).strip()