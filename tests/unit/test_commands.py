"""
Unit tests for the built-in commands.

Commands run against an in-memory flow; subprocess-backed commands use the
stubbed ProcessRunner from conftest.
"""

import json
from unittest.mock import patch

import pytest

from open_tasks.commands import (
    JoinCommand,
    JsonTransformCommand,
    MatchCommand,
    QuestionCommand,
    ReadCommand,
    ReplaceCommand,
    SetCommand,
    ShellCommand,
    TemplateCommand,
    TextTransformCommand,
    WriteCommand,
)
from open_tasks.errors import CommandExecutionError, ReferenceNotFoundError
from open_tasks.integrations import ProcessResult, ProcessRunner, render_command
from open_tasks.workflow import InMemoryFlow, TokenDecorator


class TestCoreCommands:
    async def test_set_command(self, memory_flow):
        (ref,) = await memory_flow.run(SetCommand("Hello, World!", token="greeting"))
        assert ref.token == "greeting"
        assert memory_flow.token("greeting") == "Hello, World!"

    async def test_set_command_without_token(self, memory_flow):
        (ref,) = await memory_flow.run(SetCommand("v"))
        assert ref.token is None

    async def test_replace_command(self, memory_flow):
        template = await memory_flow.set("Hi {{name}}, {{name}}! Bye {{other}}")
        (ref,) = await memory_flow.run(ReplaceCommand(template, {"name": "Ada"}, token="out"))
        assert await memory_flow.get(ref) == "Hi Ada, Ada! Bye {{other}}"

    async def test_replace_missing_template(self, memory_flow):
        template = await memory_flow.set("x")
        memory_flow.discard(template)
        with pytest.raises(ReferenceNotFoundError, match="Template reference not found"):
            await memory_flow.run(ReplaceCommand(template, {}))

    async def test_join_mixes_literals_and_references(self, memory_flow):
        first = await memory_flow.set("alpha")
        (ref,) = await memory_flow.run(JoinCommand([first, "beta"], separator=", "))
        assert await memory_flow.get(ref) == "alpha, beta"


class TestFileCommands:
    async def test_read_relative_to_cwd(self, memory_flow, temp_dir):
        (temp_dir / "notes.txt").write_text("remember", encoding="utf-8")
        (ref,) = await memory_flow.run(ReadCommand("notes.txt", token="notes"))
        assert memory_flow.token("notes") == "remember"
        assert ref.token == "notes"

    async def test_read_missing_file(self, memory_flow):
        with pytest.raises(FileNotFoundError, match="File not found: missing.txt"):
            await memory_flow.run(ReadCommand("missing.txt"))

    async def test_write_creates_parents(self, memory_flow, temp_dir):
        content = await memory_flow.set("body")
        (ref,) = await memory_flow.run(WriteCommand("out/deep/file.txt", content))

        written = temp_dir / "out" / "deep" / "file.txt"
        assert written.read_text(encoding="utf-8") == "body"
        assert await memory_flow.get(ref) == str(written.resolve())


class TestTransformCommands:
    async def test_match_tokenizes_groups(self, memory_flow):
        source = await memory_flow.set("version=1.2.3 name=open-tasks")
        refs = await memory_flow.run(
            MatchCommand(source, r"version=(\d+)\.(\d+)\.(\d+)", ["major", "minor", "patch"])
        )
        assert [ref.token for ref in refs] == ["major", "minor", "patch"]
        assert memory_flow.token("minor") == "2"

    async def test_match_skips_groups_that_did_not_participate(self, memory_flow):
        source = await memory_flow.set("abc")
        refs = await memory_flow.run(MatchCommand(source, r"(a)(x)?(c)?", ["a", "x", "c"]))
        assert [ref.token for ref in refs] == ["a"]

    async def test_match_without_match(self, memory_flow):
        source = await memory_flow.set("abc")
        with pytest.raises(CommandExecutionError, match="No match"):
            await memory_flow.run(MatchCommand(source, r"(\d+)", ["n"]))

    async def test_template_from_literal(self, memory_flow):
        await memory_flow.set("Ada", [TokenDecorator("name")])
        (ref,) = await memory_flow.run(TemplateCommand("Hello {{ name }} and {{unknown}}"))
        assert await memory_flow.get(ref) == "Hello Ada and {{unknown}}"

    async def test_template_from_file(self, memory_flow, temp_dir):
        (temp_dir / "greeting.tpl").write_text("Dear {{name}}", encoding="utf-8")
        await memory_flow.set("Grace", [TokenDecorator("name")])
        (ref,) = await memory_flow.run(TemplateCommand("greeting.tpl", token="letter"))
        assert memory_flow.token("letter") == "Dear Grace"

    async def test_template_from_reference(self, memory_flow):
        template = await memory_flow.set("{{x}}!")
        await memory_flow.set("wow", [TokenDecorator("x")])
        (ref,) = await memory_flow.run(TemplateCommand(template))
        assert await memory_flow.get(ref) == "wow!"

    async def test_text_transform(self, memory_flow):
        source = await memory_flow.set("shout")
        (ref,) = await memory_flow.run(TextTransformCommand(source, str.upper))
        assert await memory_flow.get(ref) == "SHOUT"

    async def test_json_transform(self, memory_flow):
        source = await memory_flow.set({"items": [1, 2, 3]})
        (ref,) = await memory_flow.run(
            JsonTransformCommand(source, lambda data: {"count": len(data["items"])})
        )
        assert json.loads(await memory_flow.get(ref)) == {"count": 3}

    async def test_json_transform_string_result_is_verbatim(self, memory_flow):
        source = await memory_flow.set('{"name": "x"}')
        (ref,) = await memory_flow.run(JsonTransformCommand(source, lambda data: data["name"]))
        assert await memory_flow.get(ref) == "x"

    async def test_json_transform_invalid_json(self, memory_flow):
        source = await memory_flow.set("not json")
        with pytest.raises(CommandExecutionError, match="Failed to parse JSON"):
            await memory_flow.run(JsonTransformCommand(source, lambda data: data))


class TestShellCommand:
    async def test_stores_stripped_stdout(self, memory_flow, stub_runner):
        (ref,) = await memory_flow.run(ShellCommand("echo hi", token="out", runner=stub_runner))

        assert memory_flow.token("out") == "stub output"
        call = stub_runner.calls[0]
        assert call["command"] == "echo hi"
        assert call["cwd"] == str(memory_flow.cwd)
        assert call["timeout"] == 30

    async def test_shell_executable(self, memory_flow, stub_runner):
        await memory_flow.run(ShellCommand("echo hi", shell_executable="/bin/bash", runner=stub_runner))
        assert stub_runner.calls[0]["kwargs"] == {"executable": "/bin/bash"}

    async def test_failure_raises_with_stderr(self, memory_flow, runner_factory):
        runner = runner_factory(ProcessResult(code=2, stdout="", stderr="bad things\n"))
        with pytest.raises(CommandExecutionError, match="exit code 2: bad things"):
            await memory_flow.run(ShellCommand("false", runner=runner))
        assert memory_flow.list() == []

    async def test_dry_run_from_flow_config(self, temp_dir):
        flow = InMemoryFlow(cwd=temp_dir, config={"dry_run": True})
        (ref,) = await flow.run(ShellCommand("rm -rf build"))
        assert await flow.get(ref) == "[DRY RUN] Would execute: rm -rf build"

    async def test_dry_run_bypasses_injected_runner(self, temp_dir, stub_runner):
        flow = InMemoryFlow(cwd=temp_dir, config={"dry_run": True})
        (ref,) = await flow.run(ShellCommand("rm -rf build", runner=stub_runner))

        assert stub_runner.calls == []
        assert await flow.get(ref) == "[DRY RUN] Would execute: rm -rf build"

    async def test_dry_run_runner_is_kept(self, temp_dir, runner_factory):
        runner = runner_factory(dry_run=True)
        flow = InMemoryFlow(cwd=temp_dir, config={"dry_run": True})
        await flow.run(ShellCommand("ls", runner=runner))
        assert runner.calls[0]["command"] == "ls"


class TestProcessRunner:
    def test_render_command_quotes_lists(self):
        assert render_command(["claude", "-p", "two words"]) == "claude -p 'two words'"

    def test_dry_run_does_not_execute(self):
        result = ProcessRunner(dry_run=True).run(["definitely-not-a-tool"])
        assert result.ok
        assert "definitely-not-a-tool" in result.stdout

    def test_missing_tool(self):
        result = ProcessRunner().run(["definitely-not-a-real-tool-xyz"])
        assert result.code == 127
        assert not result.ok


class TestQuestionCommand:
    async def test_stores_answer(self, memory_flow):
        with patch("open_tasks.commands.question.Prompt.ask", return_value="42") as ask:
            (ref,) = await memory_flow.run(QuestionCommand("Meaning of life?", token="answer"))

        assert memory_flow.token("answer") == "42"
        assert ask.call_args.args[0] == "Meaning of life?"

    async def test_prompt_from_reference(self, memory_flow):
        question = await memory_flow.set("Favourite colour?")
        with patch("open_tasks.commands.question.Prompt.ask", return_value="blue") as ask:
            await memory_flow.run(QuestionCommand(question, default="red"))

        assert ask.call_args.args[0] == "Favourite colour?"
        assert ask.call_args.kwargs["default"] == "red"
