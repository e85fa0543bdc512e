import re
from typing import TYPE_CHECKING

from provsync.src.errors import ExternalToolError, MalformedCertificateError

if TYPE_CHECKING:
    from provsync.src.core.signing_tools import SigningTools

# Legacy OpenSSL / LibreSSL output: subject= /UID=X/CN=iPhone Distribution: Foo (X)/OU=X
_SLASH_CN_RE = re.compile(r"/CN=([^/]*)")
# OpenSSL 1.1+ output: subject=UID = X, CN = iPhone Distribution: Foo (X), OU = X
_COMMA_CN_RE = re.compile(r"(?:^|,)\s*CN\s*=\s*((?:[^,\\]|\\.)*)")


def parse_subject_common_name(subject: str) -> str:
    """Pull the CN attribute out of an `openssl x509 -subject` line."""
    subject = subject.strip()
    if subject.startswith("subject="):
        subject = subject[len("subject=") :].strip()

    if subject.startswith("/"):
        match = _SLASH_CN_RE.search(subject)
        common_name = match.group(1) if match else None
    else:
        match = _COMMA_CN_RE.search(subject)
        common_name = re.sub(r"\\(.)", r"\1", match.group(1)) if match else None

    if not common_name or not common_name.strip():
        raise ExternalToolError(f"No CN field in certificate subject: '{subject}'")
    return common_name.strip()


def code_signing_label(common_name: str) -> str:
    """Return the identity type prefix of a developer certificate CN.

    "iPhone Distribution: Example Corp (ABCDE12345)" -> "iPhone Distribution"
    """
    label, colon, _ = common_name.partition(":")
    label = label.strip()
    if not colon or not label:
        raise MalformedCertificateError(
            f"Certificate common name '{common_name}' has no identity prefix "
            "before ':'"
        )
    return label


def resolve_code_signing_identity(
    certificate_der: bytes, tools: "SigningTools"
) -> str:
    """Derive the CODE_SIGN_IDENTITY label from a DER encoded certificate."""
    return code_signing_label(tools.extract_subject_cn(certificate_der))
