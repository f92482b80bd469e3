"""Integration adapters: slash-command files for AI coding tools."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Literal, Optional, Union

from jinja2 import Environment
from pydantic import BaseModel, Field

from ..core.exceptions import ConfigurationError, WorkspaceError
from .templates import COMMANDS, create_environment

logger = logging.getLogger(__name__)


class AdapterConfig(BaseModel):
    """Where and how one tool expects its command files."""
    name: str = Field(..., description="Integration name stored in config.json")
    display_name: str = Field(..., description="Name shown to users")
    directory: str = Field(..., description="Command directory relative to the project root")
    file_extension: str = Field(".md", description="Extension of generated files")
    filename_pattern: Literal["{name}", "clavix-{name}", "clavix/{name}"] = Field(
        "{name}",
        description="File stem; {name} is replaced by the command name"
    )
    detection_type: Literal["directory", "file", "config"] = "directory"
    detection_path: str = Field(..., description="Path whose presence marks the tool as in use")
    command_separator: Literal[":", "-"] = "-"
    supports_frontmatter: bool = False

    model_config = {"frozen": True}


@dataclass(frozen=True)
class CommandTemplate:
    """A rendered slash command, ready to be written by an adapter."""
    name: str
    description: str
    content: str


BUILTIN_ADAPTERS: Dict[str, AdapterConfig] = {
    config.name: config for config in [
        AdapterConfig(
            name="claude-code",
            display_name="Claude Code",
            directory=".claude/commands",
            filename_pattern="clavix/{name}",
            detection_path=".claude",
            command_separator=":",
            supports_frontmatter=True,
        ),
        AdapterConfig(
            name="cursor",
            display_name="Cursor",
            directory=".cursor/commands",
            filename_pattern="{name}",
            detection_path=".cursor",
        ),
        AdapterConfig(
            name="windsurf",
            display_name="Windsurf",
            directory=".windsurf/workflows",
            filename_pattern="clavix-{name}",
            detection_path=".windsurf",
        ),
        AdapterConfig(
            name="cline",
            display_name="Cline",
            directory=".clinerules/workflows",
            filename_pattern="clavix-{name}",
            detection_path=".clinerules",
        ),
        AdapterConfig(
            name="github-copilot",
            display_name="GitHub Copilot",
            directory=".github/prompts",
            file_extension=".prompt.md",
            filename_pattern="clavix-{name}",
            detection_type="file",
            detection_path=".github/copilot-instructions.md",
            supports_frontmatter=True,
        ),
    ]
}


class Adapter:
    """
    Config-driven integration adapter.

    Writes one markdown file per Clavix command into the tool's command
    directory, named after the configured filename pattern.
    """

    def __init__(
        self,
        config: AdapterConfig,
        root: Union[str, Path] = ".",
        env: Optional[Environment] = None
    ):
        self.config = config
        self.root = Path(root)
        self._env = env or create_environment()

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def display_name(self) -> str:
        return self.config.display_name

    def get_command_path(self) -> Path:
        """Directory the command files are written to."""
        return self.root / self.config.directory

    def get_target_filename(self, command: str) -> str:
        stem = self.config.filename_pattern.replace("{name}", command)
        return f"{stem}{self.config.file_extension}"

    def detect_project(self) -> bool:
        """Check whether the project already uses this tool."""
        path = self.root / self.config.detection_path
        if self.config.detection_type == "directory":
            return path.is_dir()
        return path.is_file()

    def load_command_templates(self) -> List[CommandTemplate]:
        """Render every Clavix command for this tool's invocation syntax."""
        body = self._env.get_template("command_body.md.j2")
        names = [name for name, _, _ in COMMANDS]
        templates = []
        for name, usage, summary in COMMANDS:
            content = body.render(
                name=name,
                usage=usage,
                summary=summary,
                separator=self.config.command_separator,
                related=[other for other in names if other != name],
            )
            templates.append(CommandTemplate(name=name, description=summary, content=content))
        return templates

    def format_command(self, template: CommandTemplate) -> str:
        return self._env.get_template("command.md.j2").render(
            template=template,
            frontmatter=self.config.supports_frontmatter,
        )

    def generate_commands(self, templates: Optional[List[CommandTemplate]] = None) -> List[Path]:
        """
        Write command files, replacing earlier versions.

        Args:
            templates: Commands to write; all Clavix commands if omitted

        Returns:
            Paths of the written files
        """
        if templates is None:
            templates = self.load_command_templates()

        written = []
        for template in templates:
            path = self.get_command_path() / self.get_target_filename(template.name)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(self.format_command(template))
            except OSError as e:
                raise WorkspaceError(f"Cannot write command file: {e}", path=str(path), cause=e)
            written.append(path)

        logger.info("Generated %d %s commands in %s", len(written), self.display_name, self.get_command_path())
        return written


def list_adapters() -> List[str]:
    return list(BUILTIN_ADAPTERS)


def get_adapter(
    name: str,
    root: Union[str, Path] = ".",
    env: Optional[Environment] = None
) -> Adapter:
    """
    Get the adapter for an integration name.

    Raises:
        ConfigurationError: If no adapter is registered under ``name``
    """
    config = BUILTIN_ADAPTERS.get(name)
    if config is None:
        raise ConfigurationError(
            f"Unknown integration '{name}'. Available: {list_adapters()}",
            config_key="integrations",
        )
    return Adapter(config, root, env)


def detect_integrations(root: Union[str, Path] = ".") -> List[str]:
    """Names of the integrations whose tools are present in ``root``."""
    return [name for name in BUILTIN_ADAPTERS if get_adapter(name, root).detect_project()]
