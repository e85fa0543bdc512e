import plistlib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict
from xml.parsers.expat import ExpatError

from provsync.src.errors import ConfigurationError, MalformedProfileError

if TYPE_CHECKING:
    from provsync.src.core.signing_tools import SigningTools


@dataclass(frozen=True)
class ProvisioningProfile:
    """Signing metadata pulled out of a decoded .mobileprovision"""

    uuid: str
    name: str
    team_identifier: str
    certificate_der: bytes


def _required_string(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise MalformedProfileError(f"Provisioning profile has no '{key}' string")
    return value


def _first_of(data: Dict[str, Any], key: str, item_type: type) -> Any:
    """Return the first element of a list field.

    Profiles can list several teams and certificates; only the first one is
    used, the same way Xcode picks the primary team.
    """
    values = data.get(key)
    if not isinstance(values, list) or not values:
        raise MalformedProfileError(
            f"Provisioning profile has no '{key}' entries"
        )
    first = values[0]
    if not isinstance(first, item_type):
        raise MalformedProfileError(
            f"First '{key}' entry is a {type(first).__name__}, "
            f"expected {item_type.__name__}"
        )
    return first


def parse_profile_plist(data: bytes) -> ProvisioningProfile:
    """Parse a decoded profile plist into a ProvisioningProfile."""
    try:
        raw = plistlib.loads(data)
    except (ValueError, ExpatError) as e:
        raise MalformedProfileError(f"Decoded profile is not a valid plist: {e}")
    if not isinstance(raw, dict):
        raise MalformedProfileError("Decoded profile is not a dictionary plist")

    return ProvisioningProfile(
        uuid=_required_string(raw, "UUID"),
        name=_required_string(raw, "Name"),
        team_identifier=_first_of(raw, "TeamIdentifier", str),
        certificate_der=bytes(_first_of(raw, "DeveloperCertificates", bytes)),
    )


def load_provisioning_profile(path: Path, tools: "SigningTools") -> ProvisioningProfile:
    """Decode a .mobileprovision file and extract its signing metadata."""
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Provisioning profile not found: {path}")
    return parse_profile_plist(tools.decode_profile(path))
