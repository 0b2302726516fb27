import os

METADATA_TOKEN_URL = os.environ.get(
    "GCE_METADATA_TOKEN_URL",
    "http://metadata.google.internal/computeMetadata/v1/instance/service-accounts/default/token",
)
COMPUTE_URL = os.environ.get("GCE_COMPUTE_URL", "https://compute.googleapis.com/compute/v1")
SCOPES = [s.strip() for s in os.environ.get("GCE_SCOPES", "").split(",") if s.strip()]
HTTP_TIMEOUT = float(os.environ.get("GCE_HTTP_TIMEOUT", "10"))
PORT = int(os.environ.get("GCE_COMPUTE_PORT", "8000"))
CA_BUNDLE = os.environ.get("GCE_CA_BUNDLE", "")

PROJECT_ID = os.environ.get("GCE_PROJECT_ID", "")
ZONE = os.environ.get("GCE_ZONE", "")

# Never printed, see filtered_settings()
SERVICE_ACCOUNT_KEY = os.environ.get("GCE_SERVICE_ACCOUNT_KEY", "")

APPLICATION_NAME = "gce-compute/1.0"

SENSITIVE_SETTINGS = frozenset({"GCE_SERVICE_ACCOUNT_KEY", "GCE_ACCESS_TOKEN"})
REDACTED = "[redacted]"


def settings_snapshot() -> dict[str, object]:
    """Return the active configuration keyed by environment variable name."""
    return {
        "GCE_METADATA_TOKEN_URL": METADATA_TOKEN_URL,
        "GCE_COMPUTE_URL": COMPUTE_URL,
        "GCE_SCOPES": list(SCOPES),
        "GCE_HTTP_TIMEOUT": HTTP_TIMEOUT,
        "GCE_CA_BUNDLE": CA_BUNDLE,
        "GCE_PROJECT_ID": PROJECT_ID,
        "GCE_ZONE": ZONE,
        "GCE_SERVICE_ACCOUNT_KEY": SERVICE_ACCOUNT_KEY,
    }


def filtered_settings(settings: dict[str, object] | None = None) -> dict[str, object]:
    """Return settings safe for diagnostic output.

    Keys listed in SENSITIVE_SETTINGS are replaced by a marker whenever
    they carry a value; empty values are left as-is so operators can still
    tell that a secret is missing.
    """
    if settings is None:
        settings = settings_snapshot()
    return {
        key: (REDACTED if key in SENSITIVE_SETTINGS and value else value)
        for key, value in settings.items()
    }
