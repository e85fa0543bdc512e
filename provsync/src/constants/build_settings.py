# Build settings written into every matching XCBuildConfiguration.
DEVELOPMENT_TEAM = "DEVELOPMENT_TEAM"
CODE_SIGN_IDENTITY = "CODE_SIGN_IDENTITY[sdk=iphoneos*]"
PROVISIONING_PROFILE = "PROVISIONING_PROFILE"
PROVISIONING_PROFILE_SPECIFIER = "PROVISIONING_PROFILE_SPECIFIER"

SIGNING_KEYS = (
    DEVELOPMENT_TEAM,
    CODE_SIGN_IDENTITY,
    PROVISIONING_PROFILE,
    PROVISIONING_PROFILE_SPECIFIER,
)
