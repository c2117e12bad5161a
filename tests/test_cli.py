import json
from pathlib import Path

from typer.testing import CliRunner

from workername.cli import app

runner = CliRunner()


def test_parse_text_output():
    result = runner.invoke(app, ["parse", "btcaddress.lightning@domain.worker1"])
    assert result.exit_code == 0
    assert "Lightning ID: lightning" in result.output
    assert "Worker Name: worker1" in result.output


def test_parse_json_output():
    result = runner.invoke(app, ["parse", "--format", "json", "user1", "user1.rig"])
    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert rows[0]["suffix"] is None
    assert rows[1]["suffix"] == "rig"


def test_parse_truncates_before_parsing():
    result = runner.invoke(app, ["parse", "-f", "json", "--max-length", "7", "user1.worker1"])
    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert rows[0]["workername"] == "user1.w"
    assert rows[0]["suffix"] == "w"


def test_parse_rejects_unknown_format():
    result = runner.invoke(app, ["parse", "--format", "xml", "user1"])
    assert result.exit_code != 0


def test_batch_writes_csv(tmp_path: Path):
    names = tmp_path / "names.txt"
    names.write_text("user1\n\nbtc.ln@dom.rig\n")
    out = tmp_path / "rows.csv"
    out.write_text("stale\n")
    result = runner.invoke(app, ["batch", str(names), "-o", str(out), "-f", "csv"])
    assert result.exit_code == 0
    lines = out.read_text().splitlines()
    assert lines[0] == "workername,primary_id,secondary_id,domain,suffix"
    assert lines[1] == "user1,user1,NULL,NULL,NULL"
    assert lines[2] == "btc.ln@dom.rig,btc,ln,dom,rig"


def test_batch_prints_jsonl(tmp_path: Path):
    names = tmp_path / "names.txt"
    names.write_text("user1.worker1\n")
    result = runner.invoke(app, ["batch", str(names)])
    assert result.exit_code == 0
    assert '"suffix":"worker1"' in result.output


def test_batch_missing_input(tmp_path: Path):
    result = runner.invoke(app, ["batch", str(tmp_path / "nope.txt")])
    assert result.exit_code != 0


def test_check_predefined_passes(tmp_path: Path):
    out = tmp_path / "summary.json"
    result = runner.invoke(app, ["check", "-o", str(out)])
    assert result.exit_code == 0
    summary = json.loads(out.read_text())
    assert summary["passed"] == summary["total"] == 10


def test_check_fails_on_mismatch(tmp_path: Path):
    cases = tmp_path / "cases.json"
    cases.write_text('[{"workername": "user1.worker@rig2", "primary_id": "user1"}]')
    result = runner.invoke(app, ["check", "--no-predefined", "--cases", str(cases)])
    assert result.exit_code == 1
    assert "0/1" in result.output


def test_parse_prints_emoji_codes_literally():
    result = runner.invoke(app, ["parse", "-f", "json", "btc.ln@dom.:thumbs_up:"])
    assert result.exit_code == 0
    assert json.loads(result.output)[0]["suffix"] == ":thumbs_up:"

    result = runner.invoke(app, ["parse", "user1.:smile:"])
    assert result.exit_code == 0
    assert "Worker Name: :smile:" in result.output


def test_batch_prints_emoji_codes_literally(tmp_path: Path):
    names = tmp_path / "names.txt"
    names.write_text("user1.:smile:\n")
    result = runner.invoke(app, ["batch", str(names)])
    assert result.exit_code == 0
    assert '"suffix":":smile:"' in result.output


def test_parse_truncates_utf8_bytes():
    result = runner.invoke(app, ["parse", "-f", "json", "--max-length", "7", "é.worker1"])
    assert result.exit_code == 0
    assert json.loads(result.output)[0]["suffix"] == "work"

    # The second byte of "é" would be cut, so the whole character goes.
    result = runner.invoke(app, ["parse", "-f", "json", "--max-length", "2", "aé.x"])
    assert json.loads(result.output)[0]["workername"] == "a"


def test_batch_keeps_surrounding_whitespace(tmp_path: Path):
    names = tmp_path / "names.txt"
    names.write_bytes(b"\tuser1.rig \r\n   \nuser2.rig\r\n")
    result = runner.invoke(app, ["batch", str(names)])
    assert result.exit_code == 0
    assert '"workername":"\\tuser1.rig "' in result.output
    assert '"suffix":"rig"' in result.output
    assert "Read 2 worker names" in result.output


def test_batch_rejects_invalid_utf8(tmp_path: Path):
    names = tmp_path / "names.txt"
    names.write_bytes(b"user1.\xff\n")
    result = runner.invoke(app, ["batch", str(names)])
    assert result.exit_code == 2


def test_check_table_shows_brackets_literally(tmp_path: Path):
    cases = tmp_path / "cases.json"
    cases.write_text('[{"workername": "a.b[/]", "primary_id": "x"}]')
    result = runner.invoke(app, ["check", "--no-predefined", "--cases", str(cases)])
    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "a.b[/]" in result.output
    assert "0/1" in result.output


def test_check_rejects_malformed_cases(tmp_path: Path):
    bad_yaml = tmp_path / "cases.yaml"
    bad_yaml.write_text("- workername: [unclosed\n")
    result = runner.invoke(app, ["check", "--cases", str(bad_yaml)])
    assert result.exit_code == 2

    not_mapping = tmp_path / "cases.json"
    not_mapping.write_text("[1]")
    result = runner.invoke(app, ["check", "--cases", str(not_mapping)])
    assert result.exit_code == 2
