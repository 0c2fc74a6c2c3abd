"""Creating and deleting folders in places the memory knows about."""

from __future__ import annotations

import json
import os
import posixpath
import shutil
import sys
from dataclasses import dataclass
from typing import Callable, TextIO

from opsagent.commands import extract_value_from_fact
from opsagent.llm import LLMError, ask_llm
from opsagent.memory import save_memory

DEFAULT_MEMORY_FILE = "memory.txt"


@dataclass(frozen=True)
class _Wording:
    prompt: str
    location_question: str
    name_question: str
    report_location_save: bool


_CREATE = _Wording(
    prompt="""
You are an AI assistant. Extract the folder name and location from this message:

"{text}"

Return a JSON object like:
{{
  "folder_name": "the-folder-name",
  "location": "the-location-keyword-or-null"
}}

If location is not specified or not found in memory, use null. If folder name is missing, leave it blank.
Return only JSON, no explanation.
""",
    location_question=(
        "❗ Location not specified. What is the name of the location "
        "you want to create the folder in ?"
    ),
    name_question="📂 What should the folder be called? ",
    report_location_save=False,
)

_DELETE = _Wording(
    prompt="""
You are an AI assistant. Extract the folder name and location from this message:
"{text}"
Return a JSON object like:
{{
  "folder_name": "the-folder-name",
  "location": "the-location-keyword-or-null"
}}
Look for the directory of the location used mentioned,if location is not specified or not found in memory, use null for location. If folder name is missing, leave it blank.
Return only JSON, no explanation.
""",
    location_question=(
        "❗ Location not specified. What is the name of the location "
        "you want to delete the folder from?"
    ),
    name_question="📂 What is the name of the folder to delete? ",
    report_location_save=True,
)


def _read_line(reader: TextIO) -> str:
    return reader.readline().strip()


def _ask(reader: TextIO, question: str) -> str:
    print(question, end="", flush=True)
    return _read_line(reader)


def _join_path(base: str, name: str) -> str:
    """Join two path elements and clean the result, skipping empty ones."""
    joined = "/".join(part for part in (base, name) if part)
    if not joined:
        return ""
    cleaned = posixpath.normpath(joined)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _parse_extraction(response: str) -> tuple[str, str]:
    """Return (folder name, location) from the model's JSON, or blanks."""
    try:
        data = json.loads(response)
    except ValueError:
        return "", ""
    if not isinstance(data, dict):
        return "", ""
    name = data.get("folder_name")
    location = data.get("location")
    name = "" if name is None else name
    location = "" if location is None else location
    if not isinstance(name, str) or not isinstance(location, str):
        return "", ""
    return name.strip(), location.strip()


def _is_blank(value: str) -> bool:
    return value in ("", "null")


def resolve_location(location: str, memory: list[str]) -> str:
    """Return the path remembered for ``location``, or "" if none is known."""
    if _is_blank(location):
        return ""
    keyword = location.lower()
    for line in memory:
        lowered = line.lower()
        if (
            lowered.endswith("directory is " + keyword)
            or lowered.endswith("folder is " + keyword)
            or f"directory of {keyword} is" in lowered
            or f"folder of {keyword} is" in lowered
        ):
            return extract_value_from_fact(line)
    return ""


def _save_quietly(memory_file: str, memory: list[str]) -> None:
    try:
        save_memory(memory_file, memory)
    except OSError:
        pass


def _resolve_target(
    text: str,
    reader: TextIO,
    memory: list[str],
    llm: Callable[[str], str],
    memory_file: str,
    wording: _Wording,
) -> str | None:
    """Work out the full path of the folder the user means, asking when needed."""
    try:
        response = llm(wording.prompt.format(text=text))
    except LLMError as exc:
        print("Error extracting folder info:", exc)
        return None
    print("AI response:" + response, file=sys.stderr)

    folder_name, location = _parse_extraction(response)

    if _is_blank(location):
        print(wording.location_question)
        location = _ask(reader, ">>> Enter the location keyword: ")
        if not location:
            print("❌ Location cannot be empty.")
            return None

    abs_path = resolve_location(location, memory)
    if not abs_path:
        abs_path = _ask(
            reader, f'❓ I don\'t know where "{location}" is. Please provide the full path: '
        )
        if not abs_path:
            print("❌ Path cannot be empty.")
            return None
        memory.append(f"The directory of {location} is {abs_path}")
        if wording.report_location_save:
            try:
                save_memory(memory_file, memory)
            except OSError as exc:
                print("❌ Error saving folder info to memory:", exc)
            else:
                print(f'✅ "{location}" path saved to memory.')
        else:
            _save_quietly(memory_file, memory)
            print(f'✅ "{location}" path saved to memory.')

    if _is_blank(folder_name):
        folder_name = _ask(reader, wording.name_question)
        if not folder_name:
            print("❌ Folder name cannot be empty.")
            return None

    return _join_path(abs_path, folder_name), folder_name


def _fact_index(memory: list[str], fact: str) -> int | None:
    return next((i for i, line in enumerate(memory) if line.strip() == fact), None)


def handle_create_folder(
    text: str,
    reader: TextIO,
    memory: list[str],
    llm: Callable[[str], str] = ask_llm,
    memory_file: str = DEFAULT_MEMORY_FILE,
) -> str | None:
    """Create the folder the user asked for and remember where it is.

    Returns the full path of the folder, or None when nothing was created.
    """
    target = _resolve_target(text, reader, memory, llm, memory_file, _CREATE)
    if target is None:
        return None
    full_path, folder_name = target
    print("📁 Full path to create:", full_path)

    fact = f"The directory of {folder_name} is {full_path}"
    known = _fact_index(memory, fact) is not None

    if os.path.exists(full_path):
        print("⚠️ (AI) Folder already exists at:", full_path)
    else:
        try:
            os.makedirs(full_path, exist_ok=True)
        except OSError as exc:
            print("❌ Failed to create folder:", exc)
            return None
        print("✅ Folder created successfully at:", full_path)

    if not known:
        memory.append(fact)
        try:
            save_memory(memory_file, memory)
        except OSError as exc:
            print("❌ Error saving folder info to memory:", exc)
        else:
            print(f"✅ Memory updated: {fact}")
    return full_path


def _remove(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.remove(path)


def handle_delete_folder(
    text: str,
    reader: TextIO,
    memory: list[str],
    llm: Callable[[str], str] = ask_llm,
    memory_file: str = DEFAULT_MEMORY_FILE,
) -> str | None:
    """Delete the folder the user asked for and forget its directory fact.

    Returns the full path that was targeted, or None when the request was abandoned.
    """
    target = _resolve_target(text, reader, memory, llm, memory_file, _DELETE)
    if target is None:
        return None
    full_path, folder_name = target
    print("📁 Full path to delete:", full_path)

    fact = f"The directory of {folder_name} is {full_path}"
    index = _fact_index(memory, fact)

    if not os.path.lexists(full_path):
        print("⚠️ (AI) Folder does not exist at:", full_path)
    else:
        try:
            _remove(full_path)
        except OSError as exc:
            print("❌ Failed to delete folder:", exc)
            return None
        print("✅ Folder deleted successfully at:", full_path)

    if index is None:
        print("❗ Folder info not found in memory, no update needed.")
        return full_path

    del memory[index]
    try:
        save_memory(memory_file, memory)
    except OSError as exc:
        print("❌ Error saving updated memory:", exc)
    else:
        print(f"✅ Memory updated: {fact} deleted")
    return full_path