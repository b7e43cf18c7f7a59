"""
Unit tests for agent CLI configurations, AgentCommand and PromptCommand.

No agent tool is executed: every command goes through a stubbed runner or
dry-run mode.
"""

import pytest

from open_tasks.commands import (
    AgentCommand,
    AgentConfig,
    AgentDefinition,
    ClaudeConfig,
    CodexConfig,
    GeminiConfig,
    LlmConfig,
    PromptCommand,
    available_agent_configs,
    load_agent_config,
    load_agent_config_by_name,
)
from open_tasks.commands.prompt import find_workspace_root, process_prompt
from open_tasks.errors import (
    CommandExecutionError,
    ConfigurationError,
    ReferenceNotFoundError,
    ValidationError,
)
from open_tasks.integrations import ProcessResult
from open_tasks.workflow import InMemoryFlow


class TestAgentConfigs:
    """Test command lines built for each tool."""

    def test_base_config_is_abstract(self):
        with pytest.raises(TypeError):
            AgentConfig()

    def test_claude_command(self):
        config = ClaudeConfig(model="sonnet", allow_all_tools=True)
        assert config.build_command("hi") == [
            "claude", "-p", "hi", "--allow-all-tools", "--model", "sonnet"
        ]

    def test_claude_minimal_command(self):
        assert ClaudeConfig().build_command("hi") == ["claude", "-p", "hi"]

    def test_claude_environment(self):
        assert ClaudeConfig().environment() == {}
        assert ClaudeConfig(api_key="secret").environment() == {"ANTHROPIC_API_KEY": "secret"}

    def test_gemini_command_appends_context_files(self):
        config = GeminiConfig(model="gemini-2.5-pro", context_files=["a.py", "b.py"])
        assert config.build_command("p") == [
            "gemini", "-p", "p", "--model", "gemini-2.5-pro", "a.py", "b.py"
        ]

    def test_codex_command(self):
        assert CodexConfig(model="o3").build_command("p") == ["codex", "exec", "p", "--model", "o3"]

    def test_llm_command(self):
        config = LlmConfig(model="gpt-4o", system="be brief", temperature=0.2)
        assert config.build_command("p") == [
            "llm", "p", "-m", "gpt-4o", "-s", "be brief", "-o", "temperature", "0.2"
        ]


class TestAgentCommand:
    async def test_joins_prompts_with_blank_line(self, memory_flow, stub_runner):
        first = await memory_flow.set("first")
        second = await memory_flow.set("second")

        (ref,) = await memory_flow.run(
            AgentCommand(ClaudeConfig(), [first, second], token="reply", runner=stub_runner)
        )

        call = stub_runner.calls[0]
        assert call["command"] == ["claude", "-p", "first\n\nsecond"]
        assert call["cwd"] == str(memory_flow.cwd)
        assert call["env"] is None
        assert memory_flow.token("reply") == "stub output\n"

    async def test_uses_config_directory_environment_and_timeout(self, memory_flow, stub_runner):
        prompt = await memory_flow.set("p")
        config = ClaudeConfig(working_directory="/work", timeout=12, api_key="k")

        await memory_flow.run(AgentCommand(config, prompt, runner=stub_runner))

        call = stub_runner.calls[0]
        assert call["cwd"] == "/work"
        assert call["timeout"] == 12
        assert call["env"] == {"ANTHROPIC_API_KEY": "k"}

    async def test_dry_run_records_command_line(self, memory_flow):
        prompt = await memory_flow.set("hello")
        (ref,) = await memory_flow.run(AgentCommand(ClaudeConfig(dry_run=True), [prompt]))
        assert (await memory_flow.get(ref)).startswith("[DRY RUN] Would execute: claude -p hello")

    async def test_flow_dry_run_bypasses_injected_runner(self, temp_dir, stub_runner):
        flow = InMemoryFlow(cwd=temp_dir, config={"dry_run": True})
        prompt = await flow.set("hello")
        (ref,) = await flow.run(AgentCommand(ClaudeConfig(), [prompt], runner=stub_runner))

        assert stub_runner.calls == []
        assert (await flow.get(ref)).startswith("[DRY RUN] Would execute: claude -p hello")

    async def test_missing_tool_is_reported_before_running(self, memory_flow, runner_factory):
        prompt = await memory_flow.set("p")
        runner = runner_factory(available=False)

        with pytest.raises(CommandExecutionError, match="Agent tool 'gemini' not found in PATH"):
            await memory_flow.run(AgentCommand(GeminiConfig(), [prompt], runner=runner))
        assert runner.calls == []

    async def test_missing_tool_is_ignored_in_dry_run(self, memory_flow, runner_factory):
        prompt = await memory_flow.set("p")
        runner = runner_factory(dry_run=True, available=False)

        await memory_flow.run(AgentCommand(CodexConfig(dry_run=True), [prompt], runner=runner))
        assert runner.calls[0]["command"][:2] == ["codex", "exec"]

    async def test_failure_raises(self, memory_flow, runner_factory):
        prompt = await memory_flow.set("p")
        runner = runner_factory(ProcessResult(code=1, stdout="", stderr="quota exceeded"))

        with pytest.raises(CommandExecutionError, match="Agent failed with code 1"):
            await memory_flow.run(AgentCommand(LlmConfig(), [prompt], runner=runner))

    async def test_missing_prompt_reference(self, memory_flow, stub_runner):
        prompt = await memory_flow.set("p")
        memory_flow.discard(prompt)

        with pytest.raises(ReferenceNotFoundError, match="Prompt reference not found"):
            await memory_flow.run(AgentCommand(ClaudeConfig(), [prompt], runner=stub_runner))
        assert stub_runner.calls == []


class TestAgentConfigLoader:
    @pytest.fixture
    def config(self):
        return {
            "agents": [
                {"name": "reviewer", "type": "claude", "model": "opus",
                 "options": {"allow_all_tools": True}},
                {"name": "fast", "type": "llm", "timeout": 20, "options": {"system": "terse"}},
            ]
        }

    def test_load_agent_config(self):
        config = load_agent_config(
            {"name": "g", "type": "gemini", "working_directory": "/src",
             "options": {"context_files": ["README.md"]}}
        )
        assert isinstance(config, GeminiConfig)
        assert config.working_directory == "/src"
        assert config.context_files == ["README.md"]

    def test_load_from_model_instance(self):
        config = load_agent_config(AgentDefinition(name="c", type="codex", model="o3"))
        assert isinstance(config, CodexConfig)
        assert config.model == "o3"

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError, match="Invalid agent definition"):
            load_agent_config({"name": "x", "type": "copilot"})

    def test_unknown_option(self):
        with pytest.raises(ConfigurationError, match="Invalid options"):
            load_agent_config({"name": "x", "type": "claude", "options": {"bogus": 1}})

    def test_load_by_name(self, config):
        reviewer = load_agent_config_by_name(config, "reviewer")
        assert isinstance(reviewer, ClaudeConfig)
        assert reviewer.model == "opus"
        assert reviewer.allow_all_tools is True

        fast = load_agent_config_by_name(config, "fast")
        assert isinstance(fast, LlmConfig)
        assert fast.timeout == 20
        assert fast.system == "terse"

    def test_load_by_unknown_name(self, config):
        with pytest.raises(ConfigurationError, match="Available agents: reviewer, fast"):
            load_agent_config_by_name(config, "missing")

    def test_no_agents_configured(self):
        with pytest.raises(ConfigurationError, match="No agent configurations"):
            load_agent_config_by_name({"agents": []}, "any")

    def test_available_agent_configs(self, config):
        assert available_agent_configs(config) == ["reviewer", "fast"]
        assert available_agent_configs({}) == []


class TestPromptCommand:
    @pytest.fixture
    def workspace(self, temp_dir):
        prompts = temp_dir / ".github" / "prompts"
        prompts.mkdir(parents=True)
        (prompts / "review.prompt.md").write_text(
            "---\nmode: agent\ndescription: Review code\n---\nReview this:\n$ARGUMENTS\nThanks.\n",
            encoding="utf-8",
        )
        nested = temp_dir / "src" / "pkg"
        nested.mkdir(parents=True)
        return nested

    def test_process_prompt_with_arguments(self):
        text = "---\na: b\n---\nDo $ARGUMENTS now\n"
        assert process_prompt(text, "the thing") == "Do the thing now"

    def test_process_prompt_without_arguments_drops_placeholder(self):
        assert process_prompt("Line one\n$ARGUMENTS\nLine two\n") == "Line one\nLine two"

    def test_find_workspace_root_walks_up(self, workspace, temp_dir):
        assert find_workspace_root(workspace) == temp_dir.resolve()

    async def test_runs_prompt_through_claude(self, workspace, stub_runner):
        flow = InMemoryFlow(cwd=workspace)
        (result,) = await flow.run(
            PromptCommand("review", "app.py", model="sonnet", allow_all_tools=True, runner=stub_runner)
        )

        prompt_ref = flow.list()[0]
        assert await flow.get(prompt_ref) == "Review this:\napp.py\nThanks."
        assert stub_runner.calls[0]["command"] == [
            "claude", "-p", "Review this:\napp.py\nThanks.", "--allow-all-tools", "--model", "sonnet"
        ]
        assert await flow.get(result) == "stub output\n"

    async def test_invalid_model(self, workspace, stub_runner):
        flow = InMemoryFlow(cwd=workspace)
        with pytest.raises(ValidationError, match="Invalid Claude model: gpt-4"):
            await flow.run(PromptCommand("review", model="gpt-4", runner=stub_runner))
        assert flow.list() == []
        assert stub_runner.calls == []

    async def test_missing_prompt_file(self, workspace, stub_runner):
        flow = InMemoryFlow(cwd=workspace)
        with pytest.raises(FileNotFoundError, match="Prompt file not found: nope.prompt.md"):
            await flow.run(PromptCommand("nope", runner=stub_runner))
