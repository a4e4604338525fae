from unittest.mock import AsyncMock, patch

import pytest

from schema import CyclePhase, CycleStatus, SyncCycleResult
from sync_worker import cli


@pytest.fixture(autouse=True)
def _env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SOURCE_DATABASES", raising=False)
    monkeypatch.delenv("SYNC_INTERVAL_SECONDS", raising=False)


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 2
    assert "once" in capsys.readouterr().out


@pytest.mark.parametrize(
    "result, exit_code",
    [
        (SyncCycleResult(status=CycleStatus.SUCCEEDED), 0),
        (SyncCycleResult(status=CycleStatus.FAILED, failed_phase=CyclePhase.WRITE), 1),
    ],
)
def test_once_exit_code_follows_cycle_result(result, exit_code):
    with patch("sync_worker.cli.SyncService") as service_cls:
        service = service_cls.return_value
        service.run_once = AsyncMock(return_value=result)
        service.close = AsyncMock()

        assert cli.main(["once"]) == exit_code

    service.close.assert_awaited_once()


def test_once_startup_error_exits_nonzero():
    with patch("sync_worker.cli.SyncService") as service_cls:
        service = service_cls.return_value
        service.run_once = AsyncMock(side_effect=OSError("cannot reach graph"))
        service.close = AsyncMock()

        assert cli.main(["once"]) == 1


def test_invalid_configuration_exits_with_usage_code(monkeypatch):
    monkeypatch.setenv("SYNC_INTERVAL_SECONDS", "-5")

    assert cli.main(["once"]) == 2


def test_run_interval_override_reaches_service():
    with patch("sync_worker.cli.SyncService") as service_cls, patch(
        "sync_worker.cli._serve", new=AsyncMock()
    ) as serve:
        assert cli.main(["run", "--interval", "30"]) == 0

    config = service_cls.call_args.args[0]
    assert config.interval_seconds == 30.0
    serve.assert_awaited_once_with(service_cls.return_value)


def test_run_rejects_non_positive_interval():
    with patch("sync_worker.cli.SyncService") as service_cls:
        assert cli.main(["run", "--interval", "0"]) == 2

    service_cls.assert_not_called()
