"""Tests for the .clavix workspace."""

import json

import pytest

from pydantic import ValidationError

from clavix.core import ConfigurationError, WorkspaceError
from clavix.workspace import (
    BLOCK_END,
    BLOCK_START,
    AdapterConfig,
    UserConfig,
    Workspace,
    detect_integrations,
    get_adapter,
    list_adapters,
)


class TestInit:
    """Tests for workspace initialization."""

    def test_creates_layout(self, workspace, tmp_path):
        config = workspace.init()
        assert workspace.is_initialized()
        assert (tmp_path / ".clavix" / "outputs" / "prompts").is_dir()
        assert (tmp_path / ".clavix" / "templates").is_dir()
        assert config.version == "1.2.3"

        data = json.loads(workspace.config_path.read_text())
        assert data == {"version": "1.2.3", "integrations": []}

    def test_init_is_idempotent(self, workspace):
        first = workspace.init(["claude-code"])
        second = workspace.init()
        assert first == second
        assert workspace.load_config().integrations == ["claude-code"]

    def test_init_merges_integrations(self, workspace):
        workspace.init(["claude-code"])
        config = workspace.init(["cursor", "claude-code"])
        assert config.integrations == ["claude-code", "cursor"]

    def test_not_initialized(self, workspace):
        assert not workspace.is_initialized()


class TestConfig:
    """Tests for loading and validating config.json."""

    def _write(self, workspace, content):
        workspace.clavix_dir.mkdir(parents=True, exist_ok=True)
        workspace.config_path.write_text(content)

    def test_missing_config(self, workspace):
        with pytest.raises(WorkspaceError) as exc_info:
            workspace.load_config()
        assert exc_info.value.path == str(workspace.config_path)

    def test_invalid_json(self, workspace):
        self._write(workspace, "{not json")
        with pytest.raises(WorkspaceError, match="Invalid JSON"):
            workspace.load_config()

    def test_invalid_schema(self, workspace):
        self._write(workspace, json.dumps({"integrations": "claude-code"}))
        with pytest.raises(WorkspaceError, match="Invalid config schema"):
            workspace.load_config()

    def test_blank_integration_rejected(self, workspace):
        self._write(workspace, json.dumps({"integrations": ["  "]}))
        with pytest.raises(WorkspaceError):
            workspace.load_config()

    def test_legacy_providers_migrated(self, workspace):
        self._write(workspace, json.dumps({"version": "0.9.0", "providers": ["claude-code"]}))
        config = workspace.load_config()
        assert config.integrations == ["claude-code"]
        assert config.version == "0.9.0"

    def test_unknown_fields_ignored(self):
        config = UserConfig.model_validate({"integrations": [], "theme": "dark"})
        assert not hasattr(config, "theme")


class TestSavedPrompts:
    """Tests for saving and listing prompts."""

    def test_save_prompt(self, workspace, optimizer, login_prompt):
        result = optimizer.optimize(login_prompt, "fast")
        saved = workspace.save_prompt(result, prompt_id="login")

        assert saved.path == workspace.prompts_dir / "login.md"
        content = saved.path.read_text()
        assert content.startswith("---\nid: login\nmode: fast\n")
        assert "# Optimized Prompt\n\n**Objective:** Build a login page" in content
        assert "## Original Prompt\n\nBuild a login page\n" in content
        assert "| clarity |" in content
        assert "- **ObjectiveClarifier** (medium):" in content
        assert saved.metadata["intent"] == "code-generation"
        assert saved.metadata["clavix_version"] == "1.2.3"

    def test_generated_id(self, workspace, optimizer, login_prompt):
        saved = workspace.save_prompt(optimizer.optimize(login_prompt, "deep"))
        assert saved.id.startswith("deep-")
        assert saved.path.exists()

    def test_list_prompts(self, workspace, optimizer, login_prompt):
        assert workspace.list_prompts() == []
        result = optimizer.optimize(login_prompt)
        workspace.save_prompt(result, prompt_id="b-second")
        workspace.save_prompt(result, prompt_id="a-first")

        listed = workspace.list_prompts()
        assert [p.id for p in listed] == ["a-first", "b-second"]
        assert listed[0].metadata["mode"] == "fast"

    def test_unsafe_id(self, workspace, optimizer, login_prompt):
        saved = workspace.save_prompt(optimizer.optimize(login_prompt), prompt_id="a/b")
        assert saved.path.name == "a_b.md"


class TestManagedBlock:
    """Tests for injecting the managed instructions block."""

    def test_creates_file(self, workspace, tmp_path):
        target = workspace.inject_managed_block("AGENTS.md", "hello")
        assert target == tmp_path / "AGENTS.md"
        assert target.read_text() == f"{BLOCK_START}\nhello\n{BLOCK_END}\n"

    def test_appends_to_existing(self, workspace, tmp_path):
        path = tmp_path / "AGENTS.md"
        path.write_text("# Project rules\n")
        workspace.inject_managed_block(path, "hello")
        content = path.read_text()
        assert content.startswith("# Project rules\n\n" + BLOCK_START)

    def test_replaces_block(self, workspace, tmp_path):
        path = tmp_path / "AGENTS.md"
        path.write_text(f"before\n{BLOCK_START}\nold\n{BLOCK_END}\nafter\n")
        workspace.inject_managed_block(path, "new")
        content = path.read_text()
        assert content == f"before\n{BLOCK_START}\nnew\n{BLOCK_END}\nafter\n"
        assert content.count(BLOCK_START) == 1

    def test_unterminated_marker_keeps_user_text(self, workspace, tmp_path):
        path = tmp_path / "AGENTS.md"
        path.write_text(f"intro\n{BLOCK_START}\nIMPORTANT USER NOTES\n")

        workspace.inject_managed_block(path, "v1")
        workspace.inject_managed_block(path, "v2")

        content = path.read_text()
        assert "IMPORTANT USER NOTES" in content
        assert "v1" not in content
        assert content == (
            f"intro\n{BLOCK_START}\nIMPORTANT USER NOTES\n\n"
            f"{BLOCK_START}\nv2\n{BLOCK_END}\n"
        )

    def test_render_instructions(self, workspace):
        text = workspace.render_instructions()
        assert "Clavix (v1.2.3)" in text
        assert "`.clavix/outputs/prompts`" in text
        assert '- `clavix fast "<prompt>"`:' in text


class TestCustomLayout:
    """Directory names come from settings."""

    def test_custom_dirs(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CLAVIX_DIR", ".prompts")
        from clavix.core.config import WorkspaceSettings

        workspace = Workspace(tmp_path, WorkspaceSettings())
        workspace.init()
        assert (tmp_path / ".prompts" / "config.json").exists()

    def test_instructions_with_workspace_outside_root(self, tmp_path, monkeypatch):
        elsewhere = tmp_path / "elsewhere" / ".clavix"
        monkeypatch.setenv("CLAVIX_DIR", str(elsewhere))
        from clavix.core.config import WorkspaceSettings

        workspace = Workspace(tmp_path / "project", WorkspaceSettings())
        text = workspace.render_instructions()
        assert f"`{(elsewhere / 'outputs' / 'prompts').as_posix()}`" in text


class TestAdapters:
    """Tests for integration adapters and slash-command generation."""

    def test_builtin_adapters(self):
        assert list_adapters() == ["claude-code", "cursor", "windsurf", "cline", "github-copilot"]

    def test_target_filenames(self, tmp_path):
        assert get_adapter("claude-code", tmp_path).get_target_filename("fast") == "clavix/fast.md"
        assert get_adapter("cursor", tmp_path).get_target_filename("fast") == "fast.md"
        assert get_adapter("windsurf", tmp_path).get_target_filename("fast") == "clavix-fast.md"
        assert get_adapter("github-copilot", tmp_path).get_target_filename("prd") == "clavix-prd.prompt.md"

    def test_command_path(self, tmp_path):
        adapter = get_adapter("cursor", tmp_path)
        assert adapter.get_command_path() == tmp_path / ".cursor" / "commands"

    def test_detect_project_directory(self, tmp_path):
        adapter = get_adapter("cursor", tmp_path)
        assert not adapter.detect_project()
        (tmp_path / ".cursor").mkdir()
        assert adapter.detect_project()

    def test_detect_project_file(self, tmp_path):
        adapter = get_adapter("github-copilot", tmp_path)
        (tmp_path / ".github").mkdir()
        assert not adapter.detect_project()
        (tmp_path / ".github" / "copilot-instructions.md").write_text("rules\n")
        assert adapter.detect_project()

    def test_detect_integrations(self, tmp_path):
        (tmp_path / ".claude").mkdir()
        (tmp_path / ".windsurf").mkdir()
        assert detect_integrations(tmp_path) == ["claude-code", "windsurf"]

    def test_unknown_adapter(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            get_adapter("notepad", tmp_path)
        assert exc_info.value.config_key == "integrations"
        assert "claude-code" in str(exc_info.value)

    def test_invalid_filename_pattern(self):
        with pytest.raises(ValidationError):
            AdapterConfig(
                name="x",
                display_name="X",
                directory=".x",
                filename_pattern="{name}-clavix",
                detection_path=".x",
            )

    def test_generate_commands_with_frontmatter(self, tmp_path):
        adapter = get_adapter("claude-code", tmp_path)
        written = adapter.generate_commands()

        command_dir = tmp_path / ".claude" / "commands" / "clavix"
        assert written == [command_dir / f"{name}.md" for name in ["fast", "deep", "prd", "summarize", "analyze"]]

        content = (command_dir / "fast.md").read_text()
        assert content.startswith("---\ndescription: quick cleanup of a prompt")
        assert "# Clavix: fast\n" in content
        assert 'clavix fast "<prompt>"' in content
        assert "offer `/clavix:deep`" in content
        assert "Related commands: `/clavix:deep`, `/clavix:prd`" in content

    def test_generate_commands_without_frontmatter(self, tmp_path):
        adapter = get_adapter("cursor", tmp_path)
        adapter.generate_commands()

        content = (tmp_path / ".cursor" / "commands" / "analyze.md").read_text()
        assert content.startswith("# Clavix: analyze\n\nShow intent and quality without rewriting.\n")
        assert "detected intent" in content
        assert "`/clavix-fast`" in content
        assert "offer `/clavix-deep`" not in content

    def test_generate_selected_templates(self, tmp_path):
        adapter = get_adapter("windsurf", tmp_path)
        templates = [t for t in adapter.load_command_templates() if t.name == "prd"]
        written = adapter.generate_commands(templates)
        assert written == [tmp_path / ".windsurf" / "workflows" / "clavix-prd.md"]

    def test_regenerate_overwrites(self, tmp_path):
        adapter = get_adapter("cursor", tmp_path)
        path = adapter.generate_commands()[0]
        path.write_text("stale")
        adapter.generate_commands()
        assert path.read_text().startswith("# Clavix: fast")

    def test_init_generates_commands(self, workspace, tmp_path):
        workspace.init(["claude-code", "cursor"])
        assert (tmp_path / ".claude" / "commands" / "clavix" / "deep.md").exists()
        assert (tmp_path / ".cursor" / "commands" / "deep.md").exists()

    def test_init_rejects_unknown_integration(self, workspace):
        with pytest.raises(ConfigurationError):
            workspace.init(["notepad"])
        assert not workspace.is_initialized()
