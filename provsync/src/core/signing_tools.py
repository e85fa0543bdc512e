import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Protocol

from asn1crypto import cms, x509

from provsync.src.core.cert_identity import parse_subject_common_name
from provsync.src.errors import ConfigurationError, ExternalToolError
from provsync.src.utils.scratch import scratch_file

DECODER_CHOICES = ["auto", "system", "native"]


class SigningTools(Protocol):
    """Decoding capabilities the sync pipeline needs from the outside world."""

    def decode_profile(self, path: Path) -> bytes:
        """Return the plist embedded in a signed .mobileprovision file."""
        ...

    def extract_subject_cn(self, certificate_der: bytes) -> str:
        """Return the subject common name of a DER encoded certificate."""
        ...


class SystemSigningTools:
    """Uses macOS `security` and `openssl`, like Xcode tooling does"""

    def __init__(
        self,
        security: str = "security",
        openssl: str = "openssl",
        workdir: Optional[Path] = None,
    ):
        self.security = security
        self.openssl = openssl
        self.workdir = workdir

    def _run(self, cmd: List[str]) -> subprocess.CompletedProcess:
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise ExternalToolError(f"Command not found: {cmd[0]}") from e
        if result.returncode != 0:
            raise ExternalToolError(
                f"Command failed: {' '.join(cmd)}\n{result.stderr.strip()}"
            )
        return result

    def decode_profile(self, path: Path) -> bytes:
        with scratch_file(".plist", directory=self.workdir) as plist_path:
            self._run(
                [self.security, "cms", "-D", "-i", str(path), "-o", str(plist_path)]
            )
            data = plist_path.read_bytes()

        if not data.strip():
            raise ExternalToolError(f"Decoding {path} produced no output")
        return data

    def extract_subject_cn(self, certificate_der: bytes) -> str:
        with scratch_file(
            ".crt", data=certificate_der, directory=self.workdir
        ) as cert_path:
            result = self._run(
                [
                    self.openssl,
                    "x509",
                    "-noout",
                    "-inform",
                    "DER",
                    "-subject",
                    "-in",
                    str(cert_path),
                ]
            )
        return parse_subject_common_name(result.stdout)


class NativeSigningTools:
    """Reads profiles and certificates with asn1crypto, no macOS tools needed"""

    def decode_profile(self, path: Path) -> bytes:
        try:
            content_info = cms.ContentInfo.load(Path(path).read_bytes())
            signed_data = content_info["content"]
            # The plist is the encapsulated content of the signed data
            data = signed_data["encap_content_info"]["content"].native
        except (OSError, ValueError, TypeError, KeyError) as e:
            raise ExternalToolError(f"Could not decode CMS envelope of {path}: {e}")

        if not data:
            raise ExternalToolError(f"Decoding {path} produced no output")
        return data

    def extract_subject_cn(self, certificate_der: bytes) -> str:
        try:
            subject = x509.Certificate.load(certificate_der).subject.native
        except (ValueError, TypeError, KeyError) as e:
            raise ExternalToolError(f"Could not parse developer certificate: {e}")

        common_name = subject.get("common_name")
        if not common_name:
            raise ExternalToolError("No CN field in certificate subject")
        return common_name


def system_tools_available() -> bool:
    return (
        sys.platform == "darwin"
        and shutil.which("security") is not None
        and shutil.which("openssl") is not None
    )


def get_signing_tools(decoder: str = "auto") -> SigningTools:
    """Build the SigningTools implementation for a --decoder choice."""
    if decoder == "auto":
        decoder = "system" if system_tools_available() else "native"
    if decoder == "system":
        return SystemSigningTools()
    if decoder == "native":
        return NativeSigningTools()
    raise ConfigurationError(
        f"Unknown decoder '{decoder}', expected one of: {', '.join(DECODER_CHOICES)}"
    )
