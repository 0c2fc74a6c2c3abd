"""Building and running SSH commands from remembered facts."""

from __future__ import annotations

import json
import subprocess
from typing import Callable

from opsagent.llm import ask_llm
from opsagent.memory import save_memory


class CommandError(Exception):
    """Raised when a command cannot be built or run."""


def extract_server_name(text: str, memory: list[str]) -> str:
    """Return the first word of ``text`` that appears in a memory line."""
    words = text.split()
    for line in memory:
        lowered = line.lower()
        for word in words:
            if word.lower() in lowered:
                return word
    raise CommandError("Cannot identify server from input.")


def extract_value_from_fact(line: str) -> str:
    """Return what follows the last " is " in a fact sentence, or ""."""
    parts = line.split(" is ")
    if len(parts) > 1:
        return parts[-1].strip()
    return ""


def handle_command(text: str, memory: list[str]) -> str:
    """Build an ``ssh`` command for the server named in ``text``."""
    try:
        server_name = extract_server_name(text, memory)
    except CommandError as exc:
        raise CommandError(f"Error extracting server name: {exc}") from exc

    key_path = ip_address = username = ""
    server = server_name.lower()
    for line in memory:
        lowered = line.lower()
        if server not in lowered:
            continue
        if "key" in lowered and "pem" in lowered:
            key_path = extract_value_from_fact(line)
        if "ip" in lowered:
            ip_address = extract_value_from_fact(line)
        if "user" in lowered:
            username = extract_value_from_fact(line)

    if not (key_path and ip_address and username):
        raise CommandError(
            f"Missing info for SSH: keyPath={key_path}, ip={ip_address}, user={username}"
        )
    return f"ssh -i {key_path} {username}@{ip_address}"


def _run(args: list[str], **kwargs) -> None:
    try:
        subprocess.run(args, check=True, **kwargs)
    except (subprocess.CalledProcessError, OSError) as exc:
        raise CommandError(str(exc)) from exc


def open_terminal_and_run_command(cmd: str) -> None:
    """Open a new macOS Terminal window running ``cmd``."""
    script = f'tell application "Terminal"\n    activate\n    do script "{cmd}"\nend tell'
    _run(["osascript", "-e", script])


def run_ssh_command(ssh_cmd: str) -> None:
    """Run an SSH command attached to the current terminal."""
    parts = ssh_cmd.split()
    if not parts:
        raise CommandError("empty command")
    _run(parts)


def update_memory_fact(memory: list[str], old_fact: str, new_fact: str) -> list[str]:
    """Replace the first line containing ``old_fact``, or append ``new_fact``."""
    for index, line in enumerate(memory):
        if old_fact in line:
            memory[index] = new_fact
            return memory
    memory.append(new_fact)
    return memory


def execute_shell_command(command: str) -> None:
    """Run a whitespace-separated command with no input."""
    parts = command.split()
    if not parts:
        raise CommandError("empty command")
    _run(parts, stdin=subprocess.DEVNULL)


def _memory_text(memory: dict[str, object]) -> str:
    return "".join(f"{key}: {value}\n" for key, value in memory.items())


def resolve_ssh_info(
    server_name: str,
    memory: dict[str, object],
    llm: Callable[[str], str] = ask_llm,
) -> tuple[str, str, str]:
    """Ask the model for the key path, IP address and user name of a server."""
    prompt = f"""
You are a helpful AI assistant.

Here is the memory data (as plain text key-value pairs):

{_memory_text(memory)}

The user wants to SSH into a server called "{server_name}".

From the memory, identify:
1. The correct SSH private key path (the .pem file path) of the server
2. The correct EC2 IP address of the server
3. The correct username of EC2 instance

Return ONLY a JSON like this:
{{
  "keyPath": "/path/to/file.pem",
  "ipAddress": "1.2.3.4",
  "username": "ec2-user"
}}

Strict format: JSON only, no explanation.
"""
    response = llm(prompt)
    try:
        data = json.loads(response)
    except ValueError as exc:
        raise CommandError(f"LLM return wrong format: {exc}") from exc
    if not isinstance(data, dict):
        raise CommandError("LLM return wrong format: expected a JSON object")

    fields = []
    for name in ("keyPath", "ipAddress", "username"):
        value = data.get(name) or ""
        if not isinstance(value, str):
            raise CommandError(f"LLM return wrong format: {name} is not a string")
        fields.append(value)

    key_path, ip_address, username = fields
    if not (key_path and ip_address and username):
        raise CommandError(f"Dont have enough info for server {server_name}")
    return key_path, ip_address, username


def resolve_update_info(
    server_name: str,
    text: str,
    memory: dict[str, object],
    llm: Callable[[str], str] = ask_llm,
    memory_file: str = "memory.txt",
) -> str:
    """Apply the model's ``key: value`` updates to ``memory`` and save it."""
    prompt = f"""
You are a helpful AI assistant.

Here is the current memory data (as plain text key-value pairs):

{_memory_text(memory)}

The user wants to update information about the server or project called "{server_name}" with the following input:
"{text}"

1. Analyze the user's input and determine which key(s) in the memory should be updated, based on the context and the server/project name.
2. Return a plain text list of updates, one per line, in the format: key: value
3. If you cannot determine what to update, return an empty string.

Strict format: key: value per line, no explanation.
Example:
EC2 IP Address: new.ip.address
EC2 Username: new-username
"""
    response = llm(prompt).strip()
    if not response:
        raise CommandError("No updatable info detected or wrong format")

    updated: dict[str, str] = {}
    for line in response.split("\n"):
        key, sep, value = line.partition(":")
        if sep:
            key, value = key.strip(), value.strip()
            memory[key] = value
            updated[key] = value

    if not updated:
        raise CommandError("No updatable info detected or wrong format")

    try:
        save_memory(memory_file, (f"{key}: {value}" for key, value in memory.items()))
    except OSError as exc:
        raise CommandError(f"Failed to save updated memory: {exc}") from exc

    summary = ", ".join(f"{key}: {value}" for key, value in updated.items())
    return f"Updated fields: {summary}"