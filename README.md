# opsagent

`opsagent` is an interactive terminal assistant. It keeps a plain-text memory
of facts about your servers, folders and yourself. It uses a locally running
LLM to work out what each of your messages means and then acts on it.

## Requirements

- Python 3.10 or later. There are no third-party dependencies.
- A generation server listening on `http://localhost:11434/api/generate` that
  accepts `{"model", "prompt", "stream"}` JSON and answers with a
  `{"response": ...}` object, such as Ollama, with the `mistral` model available.
- macOS with `osascript`, if you want SSH sessions opened in a new Terminal window.

## Installation

```
pip install .
```

## Usage

Start the assistant from the directory where your memory files live:

```
opsagent
```

Type a message at the `>>>` prompt. Type `exit` or `quit` to leave. End of
input also ends the session.

The LLM classifies each message, and the message is handled as one of the
following:

- **Add** – extracts facts from your message and appends them to memory, e.g.
  `The IP of Revoland ec2 instance is 203.0.113.10`.
- **OperationSystemQuestion** – answers the question from the stored facts. If
  the model's answer stops at "... is", you are asked for the missing value. The
  completed fact is then saved.
- **Command** – finds the server named in your message. It then takes the key
  (`.pem`) path, IP and user name from the stored facts that mention that server,
  builds `ssh -i <key> <user>@<ip>`, and opens it in a new macOS Terminal window.
- **Update** – asks the model which fact to replace. That fact is replaced with
  `The directory of <name> is <new value>`.
- **CreateFolder** / **DeleteFolder** – creates or removes a folder inside a
  location named in an earlier fact (e.g. "the Linux folder"). You are asked for
  any location, path or folder name that is missing. The assistant remembers
  locations you supply along the way, and adds or removes the folder's own
  directory fact.
- **PersonalInformationAddition** / **PersonalInformationQuestion** – stores
  facts about yourself and answers questions about them. When the model has no
  answer, you are asked for it and it is stored as a new fact.

Anything else gets "I didn't understand your intent."

## Memory files

Facts are plain sentences, one per line. Blank lines are ignored when reading.

- `devOpsMemory.txt` – server and folder facts, read at start-up.
- `personalMemory.txt` – personal facts, read at start-up. New facts from
  PersonalInformationAddition are written here.
- `memory.txt` – all other changes are saved here. This covers added and
  updated server and folder facts, completed answers, and personal facts
  obtained by asking you.

A missing file at start-up is reported, and that memory starts empty.

## Using it as a library

Each handler takes the model as a callable `llm(prompt) -> str`. You can pass
your own function in place of the HTTP client:

```python
from opsagent.memory import load_memory, save_memory
from opsagent.commands import handle_command, extract_value_from_fact

facts = load_memory("devOpsMemory.txt")
print(handle_command("ssh into revoland", facts))
print(extract_value_from_fact("The directory of Linux is /Users/me/Linux"))
```

- `opsagent.llm.ask_llm(prompt, model="mistral", url=...)` sends one prompt and
  returns the reply. It raises `opsagent.llm.LLMError` when the server cannot be
  reached or the reply cannot be read.
- `opsagent.memory`: `load_memory`, `save_memory`, `prompt_to_memory`.
- `opsagent.commands`:
  - `handle_command`, `extract_server_name` and `extract_value_from_fact`.
  - `update_memory_fact`.
  - `open_terminal_and_run_command`, `run_ssh_command` and
    `execute_shell_command`.
  - `resolve_ssh_info` and `resolve_update_info`, which work on a key/value
    dictionary memory.
  - These raise `CommandError` on failure.
- `opsagent.chat`: `handle_add`, `handle_question`, `handle_update` (raises
  `UpdateError`), `handle_personal_information_add` and
  `handle_personal_information_question`.
- `opsagent.folders`: `resolve_location`, `handle_create_folder` and
  `handle_delete_folder`.
- `opsagent.cli`: `classify_input`, `dispatch`, `run_loop` and `main`.

## What it does not do

- The `opsagent` command has no options. The model name and server address can
  only be changed by calling `ask_llm` yourself.
- Messages classified as PersonalInformationUpdate or PersonalInformationDelete
  are not acted on.
- Changes saved to `memory.txt` are not read back at the next start-up, which
  reads `devOpsMemory.txt`.
- Opening SSH sessions works only on macOS. Elsewhere the Command step reports
  that the Terminal could not be opened.

## Running the tests

```
pip install ".[test]"
pytest
```