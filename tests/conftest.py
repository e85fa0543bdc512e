import io
import plistlib
from datetime import datetime, timezone
from pathlib import Path

import pytest
from asn1crypto import cms, keys, x509
from rich.console import Console

TEAM_ID = "ABCDE12345"
PROFILE_UUID = "8A1C2E3F-1111-2222-3333-444455556666"
PROFILE_NAME = "Example App Store"
COMMON_NAME = "iPhone Distribution: Example Corp (ABCDE12345)"

PBXPROJ = """// !$*UTF8*$!
{
	archiveVersion = 1;
	classes = {
	};
	objectVersion = 46;
	objects = {

/* Begin PBXGroup section */
		0A0000000000000000000001 = {
			isa = PBXGroup;
			children = (
			);
			sourceTree = "<group>";
		};
/* End PBXGroup section */

/* Begin PBXNativeTarget section */
		0A0000000000000000000002 /* App */ = {
			isa = PBXNativeTarget;
			buildConfigurationList = 0A0000000000000000000010 /* Build configuration list for PBXNativeTarget "App" */;
			buildPhases = (
			);
			buildRules = (
			);
			dependencies = (
			);
			name = App;
			productName = App;
			productType = "com.apple.product-type.application";
		};
		0A0000000000000000000003 /* AppTests */ = {
			isa = PBXNativeTarget;
			buildConfigurationList = 0A0000000000000000000020 /* Build configuration list for PBXNativeTarget "AppTests" */;
			buildPhases = (
			);
			buildRules = (
			);
			dependencies = (
			);
			name = AppTests;
			productName = AppTests;
			productType = "com.apple.product-type.bundle.unit-test";
		};
/* End PBXNativeTarget section */

/* Begin PBXProject section */
		0A0000000000000000000004 /* Project object */ = {
			isa = PBXProject;
			buildConfigurationList = 0A0000000000000000000030 /* Build configuration list for PBXProject "App" */;
			compatibilityVersion = "Xcode 3.2";
			mainGroup = 0A0000000000000000000001;
			projectDirPath = "";
			projectRoot = "";
			targets = (
				0A0000000000000000000002 /* App */,
				0A0000000000000000000003 /* AppTests */,
			);
		};
/* End PBXProject section */

/* Begin XCBuildConfiguration section */
		0A0000000000000000000011 /* Debug */ = {
			isa = XCBuildConfiguration;
			buildSettings = {
				DEVELOPMENT_TEAM = OLDTEAM001;
				PRODUCT_NAME = App;
			};
			name = Debug;
		};
		0A0000000000000000000012 /* Release */ = {
			isa = XCBuildConfiguration;
			buildSettings = {
				DEVELOPMENT_TEAM = OLDTEAM001;
				PRODUCT_NAME = App;
			};
			name = Release;
		};
		0A0000000000000000000021 /* Debug */ = {
			isa = XCBuildConfiguration;
			buildSettings = {
				DEVELOPMENT_TEAM = OLDTEAM001;
				PRODUCT_NAME = AppTests;
			};
			name = Debug;
		};
		0A0000000000000000000022 /* Release */ = {
			isa = XCBuildConfiguration;
			buildSettings = {
				DEVELOPMENT_TEAM = OLDTEAM001;
				PRODUCT_NAME = AppTests;
			};
			name = Release;
		};
		0A0000000000000000000031 /* Debug */ = {
			isa = XCBuildConfiguration;
			buildSettings = {
				SDKROOT = iphoneos;
			};
			name = Debug;
		};
		0A0000000000000000000032 /* Release */ = {
			isa = XCBuildConfiguration;
			buildSettings = {
				SDKROOT = iphoneos;
			};
			name = Release;
		};
/* End XCBuildConfiguration section */

/* Begin XCConfigurationList section */
		0A0000000000000000000010 /* Build configuration list for PBXNativeTarget "App" */ = {
			isa = XCConfigurationList;
			buildConfigurations = (
				0A0000000000000000000011 /* Debug */,
				0A0000000000000000000012 /* Release */,
			);
			defaultConfigurationIsVisible = 0;
			defaultConfigurationName = Release;
		};
		0A0000000000000000000020 /* Build configuration list for PBXNativeTarget "AppTests" */ = {
			isa = XCConfigurationList;
			buildConfigurations = (
				0A0000000000000000000021 /* Debug */,
				0A0000000000000000000022 /* Release */,
			);
			defaultConfigurationIsVisible = 0;
			defaultConfigurationName = Release;
		};
		0A0000000000000000000030 /* Build configuration list for PBXProject "App" */ = {
			isa = XCConfigurationList;
			buildConfigurations = (
				0A0000000000000000000031 /* Debug */,
				0A0000000000000000000032 /* Release */,
			);
			defaultConfigurationIsVisible = 0;
			defaultConfigurationName = Release;
		};
/* End XCConfigurationList section */
	};
	rootObject = 0A0000000000000000000004 /* Project object */;
}
"""


def make_certificate_der(common_name: str = COMMON_NAME) -> bytes:
    """Build an unsigned but well formed developer certificate."""
    subject = x509.Name.build(
        {
            "common_name": common_name,
            "organizational_unit_name": TEAM_ID,
            "organization_name": "Example Corp",
            "country_name": "US",
        }
    )
    issuer = x509.Name.build(
        {"common_name": "Apple Worldwide Developer Relations Certification Authority"}
    )
    public_key = keys.PublicKeyInfo.wrap(
        keys.RSAPublicKey({"modulus": (1 << 2047) + 1, "public_exponent": 65537}),
        "rsa",
    )
    tbs = x509.TbsCertificate(
        {
            "version": "v3",
            "serial_number": 1,
            "signature": {"algorithm": "sha256_rsa"},
            "issuer": issuer,
            "validity": {
                "not_before": x509.Time(
                    {"utc_time": datetime(2024, 1, 1, tzinfo=timezone.utc)}
                ),
                "not_after": x509.Time(
                    {"utc_time": datetime(2025, 1, 1, tzinfo=timezone.utc)}
                ),
            },
            "subject": subject,
            "subject_public_key_info": public_key,
        }
    )
    certificate = x509.Certificate(
        {
            "tbs_certificate": tbs,
            "signature_algorithm": {"algorithm": "sha256_rsa"},
            "signature_value": b"\x00" * 32,
        }
    )
    return certificate.dump()


def make_profile_plist(**overrides) -> bytes:
    data = {
        "AppIDName": "Example",
        "UUID": PROFILE_UUID,
        "Name": PROFILE_NAME,
        "TeamIdentifier": [TEAM_ID],
        "TeamName": "Example Corp",
        "DeveloperCertificates": [make_certificate_der()],
        "Entitlements": {"application-identifier": f"{TEAM_ID}.com.example.app"},
    }
    data.update(overrides)
    return plistlib.dumps(data)


def make_mobileprovision(plist_data: bytes) -> bytes:
    """Wrap plist data in a CMS SignedData envelope like Apple does."""
    signed_data = cms.SignedData(
        {
            "version": "v1",
            "digest_algorithms": [],
            "encap_content_info": {"content_type": "data", "content": plist_data},
            "signer_infos": [],
        }
    )
    return cms.ContentInfo(
        {"content_type": "signed_data", "content": signed_data}
    ).dump()


class FakeSigningTools:
    """In-memory SigningTools returning canned values"""

    def __init__(self, plist_data: bytes = None, common_name: str = COMMON_NAME):
        self.plist_data = plist_data if plist_data is not None else make_profile_plist()
        self.common_name = common_name
        self.decoded = []
        self.certificates = []

    def decode_profile(self, path):
        self.decoded.append(Path(path))
        return self.plist_data

    def extract_subject_cn(self, certificate_der):
        self.certificates.append(certificate_der)
        return self.common_name


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep user config files and lane variables out of the tests."""
    for var in (
        "SPECIFIER_XCODEPROJ",
        "SPECIFIER_TARGET",
        "SPECIFIER_CONFIGURATION",
        "PROVISIONING_PROFILE",
        "PROVSYNC_DECODER",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("PROVSYNC_CONFIG", str(tmp_path / "no-config.toml"))


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def xcodeproj(workdir) -> Path:
    project_dir = workdir / "App.xcodeproj"
    project_dir.mkdir()
    (project_dir / "project.pbxproj").write_text(PBXPROJ)
    return project_dir


@pytest.fixture
def profile_file(workdir) -> Path:
    path = workdir / "Example.mobileprovision"
    path.write_bytes(make_mobileprovision(make_profile_plist()))
    return path


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def console_output(console: Console) -> str:
    return console.file.getvalue()
