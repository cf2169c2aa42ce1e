"""
Tests del CLI scripts/courtlistener_judge_sync.py.
"""
import importlib.util
import json
from pathlib import Path
from unittest.mock import Mock

import pytest

from app.infrastructure.external.courtlistener_sync.types import SyncResult


_SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "courtlistener_judge_sync.py"


@pytest.fixture(scope="module")
def cli():
    module_spec = importlib.util.spec_from_file_location("courtlistener_judge_sync", _SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def _factory(result: SyncResult):
    service = Mock()
    service.sync.return_value = result
    return service, (lambda: service)


def test_parses_options(cli):
    args = cli.build_parser().parse_args(
        ["--judge-id", "10", "--judge-id", "20", "--jurisdiction", "CA", "--batch-size", "5", "--force-refresh"]
    )
    options = cli.options_from_args(args)

    assert options.judge_ids == ("10", "20")
    assert options.jurisdiction == "CA"
    assert options.batch_size == 5
    assert options.force_refresh is True
    assert options.discover_cap is None


def test_success_exit_code_and_json_output(cli, capsys):
    service, factory = _factory(SyncResult(processed=1, created=1, success=True))

    code = cli.main(["--discover-cap", "60"], service_factory=factory)

    assert code == 0
    assert service.sync.call_args.args[0].discover_cap == 60
    printed = json.loads(capsys.readouterr().out)
    assert printed["created"] == 1
    assert printed["success"] is True


def test_partial_run_exit_code(cli, capsys):
    _, factory = _factory(SyncResult(errors=["run limit reached"], success=False))

    assert cli.main([], service_factory=factory) == 1
