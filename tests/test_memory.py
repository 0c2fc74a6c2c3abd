import pytest

from opsagent.memory import load_memory, prompt_to_memory, save_memory


def test_save_then_load_round_trip(tmp_path):
    path = tmp_path / "mem.txt"
    facts = ["The ip of alpha is 10.0.0.1", "The user of alpha is ubuntu"]
    save_memory(str(path), facts)
    assert load_memory(str(path)) == facts


def test_save_writes_one_fact_per_line(tmp_path):
    path = tmp_path / "mem.txt"
    save_memory(str(path), ["a", "b"])
    assert path.read_text(encoding="utf-8") == "a\nb\n"


def test_save_overwrites_existing(tmp_path):
    path = tmp_path / "mem.txt"
    save_memory(str(path), ["old one", "old two"])
    save_memory(str(path), ["new"])
    assert load_memory(str(path)) == ["new"]


def test_load_skips_blank_lines_and_strips(tmp_path):
    path = tmp_path / "mem.txt"
    path.write_text("  first  \n\n   \nsecond\r\n", encoding="utf-8")
    assert load_memory(str(path)) == ["first", "second"]


def test_load_empty_file(tmp_path):
    path = tmp_path / "mem.txt"
    path.write_text("", encoding="utf-8")
    assert load_memory(str(path)) == []


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_memory(str(tmp_path / "absent.txt"))


def test_prompt_to_memory_strips_and_includes_inputs():
    seen = []

    def fake_llm(prompt):
        seen.append(prompt)
        return "  IP of alpha is 10.0.0.1 \n"

    fact = prompt_to_memory("what is alpha's ip", "10.0.0.1", llm=fake_llm)
    assert fact == "IP of alpha is 10.0.0.1"
    assert '"what is alpha\'s ip"' in seen[0]
    assert '"10.0.0.1"' in seen[0]