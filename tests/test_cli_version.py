import importlib
import sys

import pytest

from delve.services import persistence

# We will import run.py as a module and exercise parse_args + main with
# temporary save databases so nothing touches the real instance folder.


@pytest.fixture()
def run_module(monkeypatch):
    # Ensure a clean import each time (important because run.py reads VERSION once)
    if "run" in sys.modules:
        del sys.modules["run"]
    mod = importlib.import_module("run")
    return mod


def test_version_flag_outputs_version(run_module, capsys):
    ver = run_module.__version__
    # argparse handles --version and exits by raising SystemExit
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    captured = capsys.readouterr().out
    assert ver in captured
    assert "Delve" in captured


def test_default_command_is_generate(run_module):
    ns = run_module.parse_args([])
    assert ns.command == "generate"


def test_generate_prints_map(run_module, capsys):
    assert run_module.main(["generate", "--seed", "42", "--level", "2"]) == 0
    out = capsys.readouterr().out
    assert "@" in out
    assert "Generated level" in out


def test_new_then_info(run_module, save_url, capsys):
    assert run_module.main(["new", "--seed", "3", "--slot", "cli", "--db", save_url]) == 0
    assert persistence.has_save("cli", save_url)
    assert run_module.main(["info", "--slot", "cli", "--db", save_url]) == 0
    out = capsys.readouterr().out
    assert "Saved game" in out


def test_info_without_save_fails(run_module, save_url, capsys):
    assert run_module.main(["info", "--slot", "none", "--db", save_url]) == 1
    assert "No usable save" in capsys.readouterr().out


def test_simulate_runs_and_saves(run_module, save_url, capsys):
    code = run_module.main(["simulate", "--seed", "9", "--turns", "40", "--save", "--slot", "sim", "--db", save_url])
    assert code == 0
    assert "Simulation finished" in capsys.readouterr().out
    assert persistence.has_save("sim", save_url)


def test_env_file_argument(monkeypatch, tmp_path, run_module, capsys):
    env_file = tmp_path / ".env"
    env_file.write_text("DELVE_SEED=77\n")
    # setenv first so teardown removes what load_dotenv writes
    monkeypatch.setenv("DELVE_SEED", "0")
    assert run_module.main(["--env-file", str(env_file), "generate"]) == 0
    assert "77" in capsys.readouterr().out


def test_render_ascii_draws_blockers_on_top(run_module):
    from delve.models import new_player, spawn_item
    from tests.dungeon_test_utils import open_grid

    grid = open_grid(3, 2)
    grid[0][0].blocked = True
    text = run_module.render_ascii(grid, [new_player(1, 1), spawn_item("sword", 1, 1)])
    assert text == "#..\n.@."
