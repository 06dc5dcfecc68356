"""Shared constants for http-curl.

The curl allow-list, the fixed silent flag and all numeric limits live here.
No magic values in other modules. Import from here.
"""

# ─── Curl invocation ──────────────────────────────────────────────────────────

# The only program this service ever launches.
CURL_BINARY: str = "curl"

# Prepended to every argument vector to suppress the progress meter.
# Not user-controlled and not subject to the allow-list.
CURL_SILENT_FLAG: str = "-s"

# Flag names permitted to pass from a request body into the argument vector.
# Fixed at build time. Neither config nor requests can extend it.
ALLOWED_CURL_OPTIONS: frozenset[str] = frozenset({
    "-k",          # Skip TLS verification
    "-x",          # HTTP proxy
    "-X",          # HTTP method
    "-d",          # Data payload
    "--data",      # Data payload (long form)
    "--location",  # Follow redirects
    "-H",          # HTTP header
    "--tls-max",   # Maximum TLS version
})

# Values that turn a flag into a standalone switch (no trailing value emitted).
STANDALONE_VALUES: frozenset[str] = frozenset({"", "true"})

# ─── Timeouts ─────────────────────────────────────────────────────────────────

# Deadline applied to the curl child process when ?timeout= is not supplied.
DEFAULT_CURL_TIMEOUT_S: float = 10.0

# ─── Request limits ───────────────────────────────────────────────────────────

# HTTP 413 is returned for request bodies exceeding this limit, before any
# handler runs.
MAX_REQUEST_BODY_BYTES: int = 1_048_576  # 1 MB

# Media type required on POST /curl.
JSON_MEDIA_TYPE: str = "application/json"

# Content type used for ?plain=true responses when the request has no Accept header.
DEFAULT_PLAIN_CONTENT_TYPE: str = "application/octet-stream"
