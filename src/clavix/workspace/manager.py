"""The .clavix workspace: directories, config, saved prompts, managed blocks."""

import hashlib
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from ..core.config import WorkspaceSettings
from ..core.exceptions import WorkspaceError
from ..intelligence.optimizer import OptimizationResult
from .adapters import Adapter, get_adapter
from .config import UserConfig
from .templates import INSTRUCTION_COMMANDS, create_environment

logger = logging.getLogger(__name__)

BLOCK_START = "<!-- CLAVIX:START -->"
BLOCK_END = "<!-- CLAVIX:END -->"

# A start marker with no other start marker before its end marker.
_BLOCK_RE = re.compile(
    re.escape(BLOCK_START) + r"(?:(?!" + re.escape(BLOCK_START) + r").)*?" + re.escape(BLOCK_END),
    re.DOTALL
)


@dataclass
class SavedPrompt:
    """A prompt previously written to the workspace."""
    id: str
    path: Path
    metadata: Dict[str, str] = field(default_factory=dict)


class Workspace:
    """
    Manages the ``.clavix`` directory of a project.

    Layout::

        .clavix/
            config.json
            outputs/
                prompts/<id>.md
            templates/
    """

    def __init__(
        self,
        root: Union[str, Path] = ".",
        settings: Optional[WorkspaceSettings] = None,
        version: str = "0.0.0"
    ):
        """
        Args:
            root: Project directory containing (or to contain) ``.clavix``
            settings: Directory and file names
            version: Clavix version recorded in config and saved prompts
        """
        self.root = Path(root)
        self.settings = settings or WorkspaceSettings()
        self.version = version
        self._env = create_environment()

    @property
    def clavix_dir(self) -> Path:
        return self.root / self.settings.root_dir

    @property
    def outputs_dir(self) -> Path:
        return self.clavix_dir / self.settings.outputs_dir

    @property
    def prompts_dir(self) -> Path:
        return self.outputs_dir / self.settings.prompts_dir

    @property
    def templates_dir(self) -> Path:
        return self.clavix_dir / self.settings.templates_dir

    @property
    def config_path(self) -> Path:
        return self.clavix_dir / self.settings.config_file

    def is_initialized(self) -> bool:
        return self.config_path.exists()

    def init(self, integrations: Optional[List[str]] = None) -> UserConfig:
        """
        Create the workspace directories and a default config.

        Safe to call repeatedly: an existing config is loaded and kept,
        with any new integrations added to it. Slash commands are
        (re)generated for every integration passed in.

        Raises:
            ConfigurationError: If an integration name is unknown
            WorkspaceError: If files cannot be read or written
        """
        requested = list(integrations or [])
        adapters = [self.adapter(name) for name in requested]

        for directory in (self.clavix_dir, self.outputs_dir, self.prompts_dir, self.templates_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise WorkspaceError(f"Cannot create {directory}", path=str(directory), cause=e)

        if self.config_path.exists():
            config = self.load_config()
            added = [name for name in requested if name not in config.integrations]
            if added:
                config = config.model_copy(update={"integrations": config.integrations + added})
                self.save_config(config)
        else:
            config = UserConfig(version=self.version, integrations=requested)
            self.save_config(config)
            logger.info("Initialized workspace at %s", self.clavix_dir)

        for adapter in adapters:
            adapter.generate_commands()
        return config

    def adapter(self, name: str) -> Adapter:
        """Adapter for an integration, rooted at this project."""
        return get_adapter(name, self.root, self._env)

    def load_config(self) -> UserConfig:
        """Read and validate config.json, migrating legacy fields."""
        path = self.config_path
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise WorkspaceError("Workspace is not initialized; run `clavix init`", path=str(path), cause=e)
        except json.JSONDecodeError as e:
            raise WorkspaceError(f"Invalid JSON in config: {e.msg}", path=str(path), cause=e)
        except OSError as e:
            raise WorkspaceError(f"Cannot read config: {e}", path=str(path), cause=e)

        try:
            return UserConfig.model_validate(data)
        except ValidationError as e:
            raise WorkspaceError(
                "Invalid config schema",
                path=str(path),
                details={"errors": [err["msg"] for err in e.errors()]},
                cause=e,
            )

    def save_config(self, config: UserConfig) -> Path:
        path = self.config_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(config.model_dump(), f, indent=2)
                f.write("\n")
        except OSError as e:
            raise WorkspaceError(f"Cannot write config: {e}", path=str(path), cause=e)
        return path

    def render_prompt(self, result: OptimizationResult, prompt_id: str, created: str) -> str:
        template = self._env.get_template("saved_prompt.md.j2")
        return template.render(
            id=prompt_id,
            result=result,
            created=created,
            version=self.version,
            dimensions=[(dim.value, score) for dim, score in result.quality.dimensions().items()],
        )

    def save_prompt(self, result: OptimizationResult, prompt_id: Optional[str] = None) -> SavedPrompt:
        """
        Render an optimization result to markdown under outputs/prompts.

        Args:
            result: The result to persist
            prompt_id: File stem; generated from mode, time and content if omitted

        Returns:
            SavedPrompt pointing at the written file
        """
        now = datetime.now(timezone.utc)
        prompt_id = prompt_id or self._generate_id(result, now)
        path = self.prompts_dir / f"{_safe_id(prompt_id)}.md"

        content = self.render_prompt(result, prompt_id, now.isoformat(timespec="seconds"))
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        except OSError as e:
            raise WorkspaceError(f"Cannot save prompt: {e}", path=str(path), cause=e)

        logger.info("Saved prompt %s to %s", prompt_id, path)
        return SavedPrompt(id=prompt_id, path=path, metadata=_read_frontmatter(content))

    def list_prompts(self) -> List[SavedPrompt]:
        """Saved prompts, oldest first by id."""
        if not self.prompts_dir.exists():
            return []
        prompts = []
        for path in sorted(self.prompts_dir.glob("*.md")):
            metadata = _read_frontmatter(path.read_text())
            prompts.append(SavedPrompt(id=metadata.get("id", path.stem), path=path, metadata=metadata))
        return prompts

    def render_instructions(self) -> str:
        try:
            prompts_path = self.prompts_dir.relative_to(self.root).as_posix()
        except ValueError:
            prompts_path = self.prompts_dir.as_posix()

        template = self._env.get_template("instructions.md.j2")
        return template.render(
            version=self.version,
            prompts_path=prompts_path,
            commands=INSTRUCTION_COMMANDS,
        )

    def inject_managed_block(self, path: Union[str, Path], content: str) -> Path:
        """
        Write ``content`` between the Clavix markers in ``path``.

        An existing block is replaced; otherwise one is appended. Text
        outside the markers is left alone. The file is created if missing.
        """
        target = Path(path)
        if not target.is_absolute():
            target = self.root / target

        block = f"{BLOCK_START}\n{content.strip()}\n{BLOCK_END}"
        try:
            existing = target.read_text() if target.exists() else ""
            if _BLOCK_RE.search(existing):
                updated = _BLOCK_RE.sub(lambda _: block, existing, count=1)
            elif existing.strip():
                updated = existing.rstrip("\n") + "\n\n" + block + "\n"
            else:
                updated = block + "\n"
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(updated)
        except OSError as e:
            raise WorkspaceError(f"Cannot update {target}: {e}", path=str(target), cause=e)

        logger.info("Updated managed block in %s", target)
        return target

    @staticmethod
    def _generate_id(result: OptimizationResult, now: datetime) -> str:
        digest = hashlib.sha1(result.enhanced.encode("utf-8")).hexdigest()[:6]
        return f"{result.mode.value}-{now.strftime('%Y%m%d-%H%M%S')}-{digest}"


def _safe_id(prompt_id: str) -> str:
    return prompt_id.replace("/", "_").replace("\\", "_")


def _read_frontmatter(content: str) -> Dict[str, str]:
    lines = content.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}
    metadata = {}
    for line in lines[1:]:
        if line.strip() == "---":
            break
        key, sep, value = line.partition(":")
        if sep:
            metadata[key.strip()] = value.strip()
    return metadata
