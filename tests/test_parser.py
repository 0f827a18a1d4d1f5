import pytest

from memalloc_sim.errors import CommandParseError
from memalloc_sim.parser import format_commands, parse_file, parse_lines
from memalloc_sim.simulator import Release, Request


def test_parse_basic_file(tmp_path):
    path = tmp_path / "requests.txt"
    path.write_text("1000\nREQUEST P1 300\n\nRELEASE P1\n  REQUEST P2   50  \n")
    workload = parse_file(str(path))
    assert workload.total_memory == 1000
    assert workload.commands == [Request("P1", 300), Release("P1"), Request("P2", 50)]


def test_leading_blank_lines_before_header():
    workload = parse_lines(["", "   ", "512", "REQUEST A 10"])
    assert workload.total_memory == 512
    assert workload.commands == [Request("A", 10)]


def test_unknown_keyword_is_skipped(caplog):
    workload = parse_lines(["100", "RESIZE A 10", "RELEASE A"])
    assert workload.commands == [Release("A")]
    assert "unknown command" in caplog.text


@pytest.mark.parametrize("lines, lineno", [
    (["abc"], 1),
    (["100", "REQUEST P1"], 2),
    (["100", "REQUEST P1 ten"], 2),
    (["100", "RELEASE"], 2),
    (["100", "RELEASE P1", "RELEASE P1 P2"], 3),
])
def test_malformed_lines(lines, lineno):
    with pytest.raises(CommandParseError) as exc:
        parse_lines(lines)
    assert exc.value.lineno == lineno
    assert f"line {lineno}" in str(exc.value)


def test_empty_input():
    with pytest.raises(CommandParseError):
        parse_lines(["", ""])


def test_format_commands_reads_back():
    commands = [Request("P1", 300), Release("P1")]
    text = format_commands(1000, commands)
    assert text == "1000\nREQUEST P1 300\nRELEASE P1\n"
    assert parse_lines(text.splitlines()).commands == commands
