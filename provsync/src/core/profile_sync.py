from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from provsync.logger import get_console
from provsync.src.core.cert_identity import resolve_code_signing_identity
from provsync.src.core.locator import locate_project_manifest
from provsync.src.core.signing_tools import SigningTools
from provsync.src.profile.provisioning_profile import load_provisioning_profile
from provsync.src.xcode.project_updater import ProjectUpdater, SigningSettings


class ProfileSync:
    """Copies signing metadata from a provisioning profile into an Xcode project.

    Every step is a prerequisite of the next one. Any failure raises a
    ProvsyncError and the project is left as it was on disk.
    """

    def __init__(self, tools: SigningTools, console: Optional[Console] = None):
        self.tools = tools
        self.console = console or get_console()

    def read_signing_settings(self, profile_path: Path) -> SigningSettings:
        """Decode the profile and derive the values to write."""
        self.console.log(f"[yellow]Reading provisioning profile:[/] {escape(str(profile_path))}")
        profile = load_provisioning_profile(profile_path, self.tools)
        identity = resolve_code_signing_identity(profile.certificate_der, self.tools)

        settings = SigningSettings(
            team_identifier=profile.team_identifier,
            code_sign_identity=identity,
            profile_uuid=profile.uuid,
            profile_name=profile.name,
        )
        self.console.log(f"[blue]Team identifier:[/] {escape(settings.team_identifier)}")
        self.console.log(f"[blue]Code signing identity:[/] {escape(settings.code_sign_identity)}")
        self.console.log(f"[blue]Profile UUID:[/] {escape(settings.profile_uuid)}")
        self.console.log(f"[blue]Profile name:[/] {escape(settings.profile_name)}")
        return settings

    def update_project(
        self,
        profile_path: Path,
        xcodeproj: Optional[Path] = None,
        target: Optional[str] = None,
        configuration: Optional[str] = None,
        dry_run: bool = False,
    ) -> List[Tuple[str, str]]:
        """Run the whole update and return the (target, configuration) pairs touched."""
        manifest = locate_project_manifest(xcodeproj)
        settings = self.read_signing_settings(profile_path)

        updater = ProjectUpdater(manifest, console=self.console)
        updater.load()
        updated = updater.apply(settings, target=target, configuration=configuration)

        if dry_run:
            self.console.print("[yellow]Dry run, project not saved[/]")
        else:
            updater.save()

        self.console.print(
            "[bold green]Finished updating xcodeproj with values extracted "
            "from provisioning profile![/]"
        )
        return updated
