import os
import shutil
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pbxproj import XcodeProject
from rich.console import Console
from rich.markup import escape

from provsync.logger import get_console
from provsync.src.constants.build_settings import (
    CODE_SIGN_IDENTITY,
    DEVELOPMENT_TEAM,
    PROVISIONING_PROFILE,
    PROVISIONING_PROFILE_SPECIFIER,
)
from provsync.src.errors import ConfigurationError, PersistError


@dataclass(frozen=True)
class SigningSettings:
    """Values written into each matching build configuration"""

    team_identifier: str
    code_sign_identity: str
    profile_uuid: str
    profile_name: str

    def as_build_settings(self) -> Dict[str, str]:
        return {
            DEVELOPMENT_TEAM: self.team_identifier,
            CODE_SIGN_IDENTITY: self.code_sign_identity,
            PROVISIONING_PROFILE: self.profile_uuid,
            PROVISIONING_PROFILE_SPECIFIER: self.profile_name,
        }


class ProjectUpdater:
    """Writes signing settings into the build configurations of an Xcode project"""

    def __init__(self, manifest: Path, console: Optional[Console] = None):
        self.manifest = Path(manifest)
        self.console = console or get_console()
        self.project: Optional[XcodeProject] = None

    def load(self) -> XcodeProject:
        try:
            self.project = XcodeProject.load(str(self.manifest))
        except Exception as e:
            raise ConfigurationError(f"Could not read project {self.manifest}: {e}")
        return self.project

    def apply(
        self,
        settings: SigningSettings,
        target: Optional[str] = None,
        configuration: Optional[str] = None,
    ) -> List[Tuple[str, str]]:
        """Overwrite the signing settings of every target/configuration that matches.

        `target` must equal the target name, `configuration` is a regular
        expression searched in the configuration name. Nothing matching is
        not an error. Returns the (target, configuration) pairs updated.
        """
        if self.project is None:
            self.load()

        try:
            config_pattern = re.compile(configuration) if configuration else None
        except re.error as e:
            raise ConfigurationError(
                f"Invalid configuration filter '{configuration}': {e}"
            )

        build_settings = settings.as_build_settings()
        updated = []
        for native_target in self.project.objects.get_targets():
            if target and native_target.name != target:
                self.console.print(
                    f"[yellow]Skipping target {escape(native_target.name)} as it doesn't "
                    f"match the filter '{escape(target)}'[/]"
                )
                continue
            self.console.print(f"[green]Updating target {escape(native_target.name)}[/]")

            for config in self._build_configurations(native_target):
                if config_pattern and not config_pattern.search(config.name):
                    self.console.print(
                        f"[yellow]Skipping configuration {escape(config.name)} as it "
                        f"doesn't match the filter '{escape(configuration)}'[/]"
                    )
                    continue
                self.console.print(f"[green]Updating configuration {escape(config.name)}[/]")
                for key, value in build_settings.items():
                    config.set_flags(key, value)
                updated.append((native_target.name, config.name))

        if not updated:
            self.console.print(
                "[yellow]No build configuration matched the given filters[/]"
            )
        return updated

    def _build_configurations(self, native_target) -> list:
        config_list = self.project.objects[native_target.buildConfigurationList]
        return [self.project.objects[key] for key in config_list.buildConfigurations]

    def save(self) -> None:
        """Replace the manifest with the updated project in one rename."""
        if self.project is None:
            raise PersistError("No project loaded, nothing to save")

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=".provsync-", suffix=".pbxproj", dir=self.manifest.parent
            )
            os.close(fd)
            shutil.copymode(self.manifest, tmp_path)
            self.project.save(tmp_path)
            os.replace(tmp_path, self.manifest)
        except OSError as e:
            if tmp_path:
                Path(tmp_path).unlink(missing_ok=True)
            raise PersistError(f"Failed to save project {self.manifest}: {e}")
        self.console.log(f"[blue]Saved project:[/] {escape(str(self.manifest))}")
