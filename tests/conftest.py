import contextlib
import io
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

import fncli
import pytest

from checkly import config, db
from checkly.core.errors import CheckError
from checkly.lib import ansi, clock

FIXED_TODAY = date(2024, 3, 15)
FIXED_NOW = datetime(2024, 3, 15, 9, 30)


@pytest.fixture(autouse=True)
def plain_output():
    ansi.use(ansi.PLAIN)
    yield
    ansi.use(ansi.DEFAULT)


@pytest.fixture
def tmp_checkly_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "CHECKLY_DIR", tmp_path)
    monkeypatch.setattr(config, "DB_PATH", tmp_path / "checkly.db")
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "config.yaml")
    monkeypatch.setattr(config.Config, "_instance", None)
    monkeypatch.setattr(config, "_config", config.Config())
    db.init()
    return tmp_path


@pytest.fixture
def fixed_today(monkeypatch):
    monkeypatch.setattr(clock, "today", lambda: FIXED_TODAY)
    monkeypatch.setattr(clock, "now", lambda: FIXED_NOW)
    return FIXED_TODAY


@dataclass
class CLIResult:
    exit_code: int
    stdout: str
    stderr: str


class FnCLIRunner:
    _discovered = False

    def invoke(self, args: list[str]) -> CLIResult:
        if not FnCLIRunner._discovered:
            fncli.autodiscover(Path(db.__file__).parent, "checkly")
            FnCLIRunner._discovered = True

        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            try:
                code = fncli.dispatch(["checkly", *args])
            except CheckError as e:
                err.write(f"{e}\n")
                code = 1
            except SystemExit as e:
                code = e.code if isinstance(e.code, int) else 1
        return CLIResult(exit_code=code or 0, stdout=out.getvalue(), stderr=err.getvalue())
