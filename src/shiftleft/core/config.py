"""Application state and configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from shiftleft.core.base import BaseConfig, BaseState
from shiftleft.core.log import Logger
from shiftleft.core.result import RunPhase, RunReport
from shiftleft.core.yaml_settings import (
    CONFIG_FILENAME,
    YamlWithIncludesSettingsSource,
)

# Modules reachable from templates in YAML values, e.g.
# {platformdirs.user_state_dir}, {os.getcwd}, {Path.home}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

_TEMPLATE_RE = re.compile(r'\{([A-Za-z_][A-Za-z0-9_.]*)\}')


# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class PrerequisiteConfig(BaseConfig):
    """An external tool that must be installed before anything runs."""

    name: str = Field(description="Tool name shown to the user")
    probes: list[str] = Field(
        min_length=1,
        description=(
            "Commands that succeed iff the tool is usable; the first "
            "one to exit 0 satisfies the prerequisite"
        ),
    )
    hint: str | None = Field(
        default=None,
        description="What to do when the tool is missing",
    )


class StageConfig(BaseConfig):
    """Ordered setup commands; the first failure ends the run."""

    name: str = Field(description="Stage header, e.g. BUILD")
    commands: list[str] = Field(
        default_factory=list,
        description="Shell commands run in order from the workdir",
    )


class CheckConfig(BaseConfig):
    """A named external validation command."""

    name: str = Field(
        description="Short id used in the summary, e.g. link-check"
    )
    label: str | None = Field(
        default=None,
        description="Human-readable description; defaults to name",
    )
    command: str = Field(description="Shell command to run")
    success_codes: list[int] = Field(
        default_factory=lambda: [0],
        description="Exit statuses that count as passing",
    )

    @model_validator(mode='after')
    def _default_label(self) -> CheckConfig:
        if not self.label:
            self.label = self.name
        return self

    def succeeded(self, returncode: int) -> bool:
        return returncode in self.success_codes


class CheckStageConfig(BaseConfig):
    """A pipeline stage holding one or more checks."""

    name: str = Field(description="Stage header, e.g. QUALITY CHECKS")
    checks: list[CheckConfig] = Field(default_factory=list)


class SummaryConfig(BaseConfig):
    """Text shown around the final verdict."""

    success_message: str = Field(
        default="Your code is ready for CI!",
        description="Printed after ALL TESTS PASSED",
    )
    success_notes: list[str] = Field(
        default_factory=list,
        description="Parity guarantees listed on success",
    )
    failure_message: str = Field(
        default="Please fix the failing tests before pushing.",
        description="Printed after the list of failed checks",
    )
    hint: str | None = Field(
        default=None,
        description="Closing tip for diagnosing failures",
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default_factory=Logger,
        description="Logger configuration and runtime instance",
    )
    project: str = Field(
        default="shiftleft",
        description="Project name, used in the banner and log paths",
    )
    goal: str = Field(
        default="Environment parity with CI",
        description="One-line statement printed under the banner",
    )
    image: str = Field(
        default="{config.project}",
        description="Base image name, usable as {config.image}",
    )
    workdir: Path = Field(
        default_factory=Path.cwd,
        description="Directory every command runs in",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir("shiftleft",
                                                     appauthor=False))
        ),
        description=(
            "Root directory for log files "
            "(supports {platformdirs.*} templates)"
        ),
    )
    output_dir: Path = Field(
        default=Path("{config.log_root}/checks"),
        description="Directory for per-check output logs",
    )
    prerequisites: list[PrerequisiteConfig] = Field(
        default_factory=list,
        description="Tools that must be installed",
    )
    build: StageConfig = Field(
        default_factory=lambda: StageConfig(name="BUILD"),
        description="Image build commands run before any check",
    )
    stages: list[CheckStageConfig] = Field(
        default_factory=list,
        description="Check stages in execution order",
    )
    summary: SummaryConfig = Field(
        default_factory=SummaryConfig,
        description="Summary wording",
    )
    setup: StageConfig = Field(
        default_factory=lambda: StageConfig(name="SETUP"),
        description="Commands for the setup task",
    )
    clean: StageConfig = Field(
        default_factory=lambda: StageConfig(name="CLEAN"),
        description="Commands for the clean task",
    )

    @model_validator(mode='after')
    def _unique_check_names(self) -> Config:
        seen = set()
        for check in self.checks():
            if check.name in seen:
                raise ValueError(f"Duplicate check name: {check.name}")
            seen.add(check.name)
        return self

    def checks(self) -> list[CheckConfig]:
        """Every declared check, in execution order."""
        return [check for stage in self.stages for check in stage.checks]

    def start_logging(self) -> Logger:
        """Install the configured logger as the process-wide logger."""
        from shiftleft.core.log import setup_logger

        return setup_logger(
            log_root=self.log_root,
            run_name=self.project,
            level=self.logger.level,
            console=self.logger.console,
            otlp=self.logger.otlp,
            file=self.logger.file,
        )

    def close(self):
        from shiftleft.core.log import logger

        logger.close()
        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable during workflow execution)
# ============================================================

class RunState(BaseState):
    """State of the parity run workflow."""

    phase: RunPhase = Field(
        default=RunPhase.INIT,
        description="Current lifecycle phase",
    )
    only: list[str] | None = Field(
        default=None,
        description="Restrict the run to these check names",
    )
    skip_build: bool = Field(
        default=False,
        description="Skip the build stage",
    )
    report: RunReport | None = Field(
        default=None,
        description="Final report once a terminal phase is reached",
    )


class Runtime(BaseModel):
    """All runtime state organized by workflow."""

    run: RunState = Field(
        default_factory=RunState,
        description="Parity run state",
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state; flows through every workflow.

    Configuration sources (highest priority first):
    1. Command-line arguments (--config.project value)
    2. YAML: package defaults < user config < ./shiftleft.yaml
       < --include files
    3. .env file
    4. Environment variables (SHIFTLEFT_CONFIG__PROJECT=value)
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during workflow execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to merge on top of the "
            "configuration. Repeat --include for several files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file=CONFIG_FILENAME,
        env_file=".env",
        env_prefix="SHIFTLEFT_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> State:
        """Expand {config.*} and namespace templates everywhere.

        Logging starts afterwards so that log_root and the file
        sink path are already expanded.
        """
        self._substitute_recursive(self.config)
        self.config.start_logging()
        return self

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i in range(len(obj)):
                obj[i] = self._substitute_value(obj[i])

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.substitute_string(value)
        elif isinstance(value, Path):
            return Path(self.substitute_string(str(value)))
        elif isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def substitute_string(self, value: str) -> str:
        """Replace {dotted.path} templates with their values.

        Examples:
            "{config.image}:dev" -> "playground:dev"
            "{platformdirs.user_state_dir}"
            -> "~/.local/state/shiftleft"

        Only config.* paths and the os, platformdirs and Path
        namespaces are expanded. Anything else (shell ${VAR}
        expansions, jq filters, docker --format strings) and
        references that do not resolve are left as they are.
        """
        def replace_template(match):
            head, *parts = match.group(1).split(".")
            if not parts:
                return match.group(0)

            if head == "config":
                obj = self.config
            elif head in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[head]
            else:
                return match.group(0)

            try:
                for part in parts:
                    obj = getattr(obj, part)

                if callable(obj):
                    if head == "config":
                        return match.group(0)
                    if head == 'platformdirs':
                        obj = obj('shiftleft', appauthor=False)
                    else:
                        obj = obj()

                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        # Values may reference other templated values
        for _ in range(5):
            expanded = _TEMPLATE_RE.sub(replace_template, value)
            if expanded == value:
                break
            value = expanded
        return value


__all__ = [
    "CheckConfig",
    "CheckStageConfig",
    "Config",
    "PrerequisiteConfig",
    "RunState",
    "Runtime",
    "State",
    "StageConfig",
    "SummaryConfig",
]
