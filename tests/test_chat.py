import io
import json

import pytest

from opsagent.chat import (
    UpdateError,
    handle_add,
    handle_personal_information_add,
    handle_personal_information_question,
    handle_question,
    handle_update,
)
from opsagent.llm import LLMError
from opsagent.memory import load_memory


class FakeLLM:
    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def test_question_answered_from_memory(tmp_path):
    memory_file = tmp_path / "memory.txt"
    memory = ["Ip of web is 10.1.1.1"]
    llm = FakeLLM("  Ip of web is 10.1.1.1 \n")
    result = handle_question("what is web ip", memory, io.StringIO(""), llm, str(memory_file))
    assert result == "Ip of web is 10.1.1.1"
    assert not memory_file.exists()
    assert memory == ["Ip of web is 10.1.1.1"]


def test_question_prompt_contains_input_and_memory(tmp_path):
    memory = ["fact a", "fact b"]
    llm = FakeLLM("answer")
    handle_question("my question", memory, io.StringIO(""), llm, str(tmp_path / "m.txt"))
    assert '"my question"' in llm.prompts[0]
    assert "fact a\nfact b" in llm.prompts[0]


def test_question_missing_info_is_completed(tmp_path):
    memory_file = tmp_path / "memory.txt"
    memory = ["Ip of web is 10.1.1.1"]
    llm = FakeLLM("The user of web is")
    result = handle_question(
        "who is web user", memory, io.StringIO("ubuntu\n"), llm, str(memory_file)
    )
    assert result == "The user of web is ubuntu"
    assert load_memory(str(memory_file)) == ["Ip of web is 10.1.1.1", "The user of web is ubuntu"]
    assert memory == ["Ip of web is 10.1.1.1"]


def test_question_llm_error(tmp_path, capsys):
    llm = FakeLLM(LLMError("down"))
    result = handle_question("q", [], io.StringIO(""), llm, str(tmp_path / "m.txt"))
    assert result is None
    assert "Error from AI: down" in capsys.readouterr().out


def test_update_replaces_directory_fact(tmp_path):
    memory_file = tmp_path / "memory.txt"
    memory = ["Ip of web is 10.1.1.1", "The directory of docs is /old/docs"]
    reply = json.dumps({"old_fact": "/old/docs", "new_fact": "/new/place/docs"})
    result = handle_update("move docs", memory, FakeLLM(reply), str(memory_file))
    assert result == "/new/place/docs"
    assert memory[1] == "The directory of docs is /new/place/docs"
    assert memory[0] == "Ip of web is 10.1.1.1"
    assert load_memory(str(memory_file)) == memory


def test_update_trailing_slash_uses_last_element(tmp_path):
    memory = ["The directory of docs is /old/docs"]
    reply = json.dumps({"old_fact": "/old/docs", "new_fact": "/srv/docs/"})
    handle_update("move docs", memory, FakeLLM(reply), str(tmp_path / "m.txt"))
    assert memory == ["The directory of docs is /srv/docs/"]


def test_update_old_fact_not_found(tmp_path):
    memory = ["The directory of docs is /old/docs"]
    reply = json.dumps({"old_fact": "/nowhere", "new_fact": "/x/y"})
    with pytest.raises(UpdateError, match="old fact not found in memory"):
        handle_update("move", memory, FakeLLM(reply), str(tmp_path / "m.txt"))
    assert memory == ["The directory of docs is /old/docs"]


def test_update_invalid_json(tmp_path):
    with pytest.raises(UpdateError, match="failed to parse AI JSON"):
        handle_update("move", ["a"], FakeLLM("not json"), str(tmp_path / "m.txt"))


def test_update_llm_error(tmp_path):
    with pytest.raises(UpdateError, match="error from AI"):
        handle_update("move", ["a"], FakeLLM(LLMError("down")), str(tmp_path / "m.txt"))


def test_add_appends_non_blank_lines(tmp_path):
    memory_file = tmp_path / "memory.txt"
    memory = ["existing"]
    llm = FakeLLM("fact one\n   \n  fact two  \n")
    added = handle_add("some text", memory, llm, str(memory_file))
    assert added == ["fact one", "fact two"]
    assert memory == ["existing", "fact one", "fact two"]
    assert load_memory(str(memory_file)) == memory
    assert "some text" in llm.prompts[0]


def test_add_nothing_useful(tmp_path, capsys):
    memory_file = tmp_path / "memory.txt"
    memory = []
    assert handle_add("hello", memory, FakeLLM("  \n\n"), str(memory_file)) == []
    assert memory == []
    assert not memory_file.exists()
    assert "Nothing useful to store." in capsys.readouterr().out


def test_add_llm_error_leaves_memory(tmp_path):
    memory = ["x"]
    assert handle_add("t", memory, FakeLLM(LLMError("down")), str(tmp_path / "m.txt")) == []
    assert memory == ["x"]


def test_personal_add_saves(tmp_path, capsys):
    memory_file = tmp_path / "personal.txt"
    memory = []
    added = handle_personal_information_add(
        "my email is someone@example.com", memory,
        FakeLLM("User's email is someone@example.com\n"), str(memory_file),
    )
    assert added == ["User's email is someone@example.com"]
    assert load_memory(str(memory_file)) == added
    assert "Personal information saved successfully." in capsys.readouterr().out


def test_personal_add_save_failure_reported(tmp_path, capsys):
    memory = []
    added = handle_personal_information_add("t", memory, FakeLLM("a fact"), str(tmp_path))
    assert added == ["a fact"]
    assert memory == ["a fact"]
    assert "Failed to save personal information to memory" in capsys.readouterr().out


def test_personal_add_nothing(tmp_path, capsys):
    assert handle_personal_information_add("t", [], FakeLLM(""), str(tmp_path / "p.txt")) == []
    assert "No useful personal information found." in capsys.readouterr().out


def test_personal_question_answered(tmp_path):
    memory_file = tmp_path / "m.txt"
    llm = FakeLLM(" User's name is Sam \n")
    result = handle_personal_information_question(
        "what is my name", ["User's name is Sam"], io.StringIO(""), llm, str(memory_file)
    )
    assert result == "User's name is Sam"
    assert len(llm.prompts) == 1
    assert not memory_file.exists()


@pytest.mark.parametrize("marker", ["NOT_FOUND", "not_found", " Not_Found\n"])
def test_personal_question_not_found_asks_user(tmp_path, marker):
    memory_file = tmp_path / "m.txt"
    memory = ["User's name is Sam"]
    llm = FakeLLM(marker, "The city is Oslo\n")
    result = handle_personal_information_question(
        "where do I live", memory, io.StringIO("Oslo\n"), llm, str(memory_file)
    )
    assert result == "The city is Oslo"
    assert '"Oslo"' in llm.prompts[1]
    assert '"where do I live"' in llm.prompts[1]
    assert load_memory(str(memory_file)) == ["User's name is Sam", "The city is Oslo"]
    assert memory == ["User's name is Sam"]


def test_personal_question_empty_fact(tmp_path, capsys):
    memory_file = tmp_path / "m.txt"
    llm = FakeLLM("NOT_FOUND", "   ")
    result = handle_personal_information_question(
        "q", [], io.StringIO("x\n"), llm, str(memory_file)
    )
    assert result is None
    assert not memory_file.exists()
    assert "Could not generate a memory fact." in capsys.readouterr().out