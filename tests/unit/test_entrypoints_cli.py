import os

import pytest

from react_loop.entrypoints import cli
from react_loop.utils.llm_clients import ScriptedLLMClient


def write_configs(config_dir):
    config_dir.mkdir()
    (config_dir / "base.yaml").write_text(
        "llm:\n  model: qwen-plus\nworkflow:\n  max_iterations: 3\nlogging:\n  level: WARNING\n",
        encoding="utf-8",
    )


def test_main_prints_final_answer(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DASH_SCOPE_MODEL", raising=False)
    write_configs(tmp_path / "configs")
    scripted = ScriptedLLMClient(["Final Answer: Sunny and 25C."])
    monkeypatch.setattr(cli, "build_llm_client", lambda config: scripted)

    exit_code = cli.main(["Weather in Paris?"])

    assert exit_code == 0
    assert "Sunny and 25C." in capsys.readouterr().out
    assert "New input: Weather in Paris?" in scripted.calls[0][1].content


def test_main_reports_exhaustion(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    write_configs(tmp_path / "configs")
    scripted = ScriptedLLMClient(["still thinking"])
    monkeypatch.setattr(cli, "build_llm_client", lambda config: scripted)

    exit_code = cli.main(["--max-iterations", "2"])

    assert exit_code == 1
    assert "Exceeded maximum number of reasoning loops" in capsys.readouterr().out
    assert len(scripted.calls) == 2


def test_setup_exports_key_from_secrets_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DASH_SCOPE_API_KEY", "")
    monkeypatch.delenv("DASH_SCOPE_API_KEY")
    (tmp_path / "config.yml").write_text("dash_scope_api_key: sk-local\n", encoding="utf-8")

    cli.setup()

    assert os.environ["DASH_SCOPE_API_KEY"] == "sk-local"


def test_main_rejects_non_positive_max_iterations(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    write_configs(tmp_path / "configs")
    monkeypatch.setattr(cli, "build_llm_client", lambda config: ScriptedLLMClient(["x"]))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--max-iterations", "0"])

    assert excinfo.value.code == 2
    assert "--max-iterations must be at least 1" in capsys.readouterr().err
