"""Tests for the contentforge command line interface."""

import json
from unittest.mock import patch

import pytest

from contentforge.cli.main import ContentForgeCommands, create_parser, main
from contentforge.core.scheduled_generator import ScheduledGenerator
from contentforge.providers import ProviderRegistry
from contentforge.types import ConnectionResult
from tests.mocks import MockProvider
from tests.mocks.mock_provider import mock_factory


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


class TestCLI:
    """Tests for the CLI entry point."""

    @pytest.fixture(autouse=True)
    def provider(self):
        ProviderRegistry.clear()
        mock = MockProvider()
        ProviderRegistry.register("openai", mock_factory(mock))
        yield mock
        ProviderRegistry.clear()

    @pytest.fixture
    def state_dir(self, tmp_path, capsys):
        state_dir = str(tmp_path / "state")
        main(["--state-dir", state_dir, "settings", "--provider", "openai", "--model", "gpt-4o", "--api-key", "sk-test-key-123"])
        capsys.readouterr()
        return state_dir

    def _generate(self, state_dir, capsys, count=1):
        main(["--state-dir", state_dir, "generate", "--count", str(count), "--content-type", "technology"])
        out = capsys.readouterr().out
        assert f"Started generating {count} AI posts..." in out
        return out.strip().split("Batch ID: ")[1]

    def test_parser(self):
        args = create_parser().parse_args(["generate", "--count", "3", "--content-type", "food", "--editor", "classic"])
        assert args.count == 3
        assert args.editor == "classic"
        assert args.state_dir == "./.contentforge"

    def test_no_command_prints_help(self, capsys):
        main([])
        assert "usage:" in capsys.readouterr().out

    def test_settings_are_masked(self, state_dir, capsys):
        main(["--state-dir", state_dir, "settings"])
        settings = json.loads(capsys.readouterr().out)

        assert settings["provider"] == "openai"
        assert settings["model"] == "gpt-4o"
        assert settings["api_key"] == "sk***********23"
        assert settings["is_configured"] is True

    def test_generate_work_status(self, state_dir, capsys, provider):
        provider.add_response("CLI Post", "Body")
        batch_id = self._generate(state_dir, capsys)

        main(["--state-dir", state_dir, "work"])
        assert "Ran 1 tasks, 1 pending" in capsys.readouterr().out

        main(["--state-dir", state_dir, "status", batch_id])
        out = capsys.readouterr().out
        assert f"Batch {batch_id}: completed" in out
        assert "Progress: 1/1 (100%)" in out
        assert "CLI Post" in out

    def test_list_json(self, state_dir, capsys):
        batch_id = self._generate(state_dir, capsys)

        main(["--state-dir", state_dir, "list", "--format", "json"])
        listing = json.loads(capsys.readouterr().out)

        assert listing["total"] == 1
        assert listing["batches"][0]["batch_id"] == batch_id
        assert listing["batches"][0]["status"] == "processing"

    def test_list_table(self, state_dir, capsys):
        main(["--state-dir", state_dir, "list"])
        assert "No batches found" in capsys.readouterr().out

        batch_id = self._generate(state_dir, capsys)
        main(["--state-dir", state_dir, "list", "--status", "processing"])
        assert batch_id in capsys.readouterr().out

    def test_unknown_batch_exits_with_error(self, state_dir, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--state-dir", state_dir, "status", "batch_missing"])

        assert exc_info.value.code == 1
        assert "Error: Batch not found or expired" in capsys.readouterr().err

    def test_invalid_count_exits_with_error(self, state_dir, capsys):
        with pytest.raises(SystemExit):
            main(["--state-dir", state_dir, "generate", "--count", "0", "--content-type", "general"])

        assert "Number of posts must be at least 1." in capsys.readouterr().err

    def test_test_connection(self, state_dir, capsys, provider):
        main(["--state-dir", state_dir, "test-connection"])
        assert "Connection successful" in capsys.readouterr().out

        provider.connection_result = ConnectionResult(success=False, message="Invalid key")
        with pytest.raises(SystemExit):
            main(["--state-dir", state_dir, "test-connection"])
        assert "Invalid key" in capsys.readouterr().out


class TestContentForgeCommands:
    """Tests for command implementations."""

    @pytest.fixture(autouse=True)
    def provider(self):
        ProviderRegistry.clear()
        mock = MockProvider()
        ProviderRegistry.register("openai", mock_factory(mock))
        yield mock
        ProviderRegistry.clear()

    def test_work_wait_runs_whole_batch_but_not_cleanup(self, tmp_path):
        commands = ContentForgeCommands(state_dir=str(tmp_path))
        commands.save_settings("openai", "gpt-4", "sk-test")

        clock = FakeClock(1_700_000_000)
        commands.dispatcher.clock = clock
        commands.generator.clock = clock

        result = commands.generate(count=3, content_type="travel")

        with patch("contentforge.cli.main.time.sleep", side_effect=clock.sleep) as sleep:
            assert commands.work(wait=True) == 3

        assert [c.args[0] for c in sleep.call_args_list] == [5, 5]
        assert commands.status(result["batch_id"])["completed"] == 3
        assert [t.hook for t in commands.dispatcher.pending()] == [ScheduledGenerator.CLEANUP_HOOK]

    def test_pending_tasks_survive_restart(self, tmp_path):
        commands = ContentForgeCommands(state_dir=str(tmp_path))
        commands.save_settings("openai", "gpt-4", "sk-test")
        commands.generate(count=2, content_type="general")

        restarted = ContentForgeCommands(state_dir=str(tmp_path))
        tasks = restarted.dispatcher.pending()

        assert len(tasks) == 1
        assert tasks[0].hook == ScheduledGenerator.SEQUENTIAL_HOOK
        assert tasks[0].payload["total_count"] == 2

    def test_work_max_tasks(self, tmp_path):
        commands = ContentForgeCommands(state_dir=str(tmp_path))
        commands.save_settings("openai", "gpt-4", "sk-test")
        commands.generate(count=1, content_type="general")
        commands.generate(count=1, content_type="general")

        assert commands.work(max_tasks=1) == 1
        assert len(commands.dispatcher.pending(hook=ScheduledGenerator.SEQUENTIAL_HOOK)) == 1
