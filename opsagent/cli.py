"""Interactive loop that classifies requests and hands them to the handlers."""

from __future__ import annotations

import argparse
import sys
from typing import Callable, TextIO

from opsagent.chat import (
    UpdateError,
    handle_add,
    handle_personal_information_add,
    handle_personal_information_question,
    handle_question,
    handle_update,
)
from opsagent.commands import CommandError, handle_command, open_terminal_and_run_command
from opsagent.folders import handle_create_folder, handle_delete_folder
from opsagent.llm import LLMError, ask_llm
from opsagent.memory import load_memory

DEVOPS_MEMORY_FILE = "devOpsMemory.txt"
PERSONAL_MEMORY_FILE = "personalMemory.txt"


def classify_input(text: str, llm: Callable[[str], str] = ask_llm) -> str:
    """Ask the model which kind of request ``text`` is and return that word."""
    prompt = f"""
You are a classification bot.

Your job is to classify the user's message into **only one** of the following types:
- OperationSystemQuestion
- DeleteFolder 
- Add
- Command
- Update
- CreateFolder
- PersonalInformationAddition
- PersonalInformationUpdate
- PersonalInformationQuestion
- PersonalInformationDelete
- Unknown

Message:
{text}

Return only the classification **as one of the exact words above**.
Do not explain.
Do not include quotes.
Do not include any tags like <think>.
Only return one word."""
    try:
        response = llm(prompt)
    except LLMError:
        print("Classifying input: ")
        raise
    print("Classifying input:", response)
    return response.strip()


def _run_command(text: str, memory: list[str]) -> None:
    try:
        cmd = handle_command(text, memory)
    except CommandError as exc:
        print("Command Error:", exc)
        return
    print("SSH Command:", cmd)
    print("Executing SSH...")
    try:
        open_terminal_and_run_command(cmd)
    except CommandError as exc:
        print("❌ Failed to open Terminal:", exc)
    else:
        print("✅ SSH command sent to new Terminal window.")


def dispatch(
    text: str,
    reader: TextIO,
    devops_memory: list[str],
    personal_memory: list[str],
    llm: Callable[[str], str] = ask_llm,
) -> str | None:
    """Classify ``text`` and run the matching handler.

    Returns the classification, or None when it could not be obtained.
    """
    try:
        class_type = classify_input(text, llm)
    except LLMError as exc:
        print("Error classifying input:", exc)
        return None

    match class_type:
        case "Add":
            handle_add(text, devops_memory, llm=llm)
        case "OperationSystemQuestion":
            handle_question(text, devops_memory, reader, llm=llm)
        case "Command":
            _run_command(text, devops_memory)
        case "Update":
            try:
                new_fact = handle_update(text, devops_memory, llm=llm)
            except UpdateError as exc:
                print("Command Error:", exc)
            else:
                print("Updating information...", new_fact)
        case "DeleteFolder":
            handle_delete_folder(text, reader, devops_memory, llm=llm)
        case "CreateFolder":
            handle_create_folder(text, reader, devops_memory, llm=llm)
        case "PersonalInformationAddition":
            handle_personal_information_add(text, personal_memory, llm=llm)
        case "PersonalInformationQuestion":
            handle_personal_information_question(text, personal_memory, reader, llm=llm)
        case _:
            print("Agent: I didn't understand your intent.")
    return class_type


def _load(filename: str, label: str) -> list[str]:
    try:
        return load_memory(filename)
    except OSError as exc:
        print(f"Cannot load {label}:", exc)
        return []


def run_loop(
    reader: TextIO | None = None,
    llm: Callable[[str], str] = ask_llm,
    devops_file: str = DEVOPS_MEMORY_FILE,
    personal_file: str = PERSONAL_MEMORY_FILE,
) -> None:
    """Read requests line by line until "exit", "quit" or end of input."""
    if reader is None:
        reader = sys.stdin
    devops_memory = _load(devops_file, "devOpsMemory")
    personal_memory = _load(personal_file, "personalMemory")

    while True:
        print(">>> ", end="", flush=True)
        line = reader.readline()
        if not line:
            print()
            break
        text = line.strip()
        if text in ("exit", "quit"):
            print("Bye user!")
            break
        dispatch(text, reader, devops_memory, personal_memory, llm=llm)


def main(argv: list[str] | None = None) -> int:
    """Start the interactive agent."""
    parser = argparse.ArgumentParser(
        prog="opsagent", description="Chat with a local model about your servers and folders."
    )
    parser.parse_args(argv)
    print("Hi user!")
    run_loop()
    return 0


if __name__ == "__main__":
    sys.exit(main())