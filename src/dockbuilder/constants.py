# --- Log and Debug ---
# Short aliases for module names to keep env concise
LOG_ALIAS_MAP = {
    "pull": "dockbuilder.builder.pull",
    "apl": "dockbuilder.builder.pull",
    "exec": "dockbuilder.builder.executor",
    "bld": "dockbuilder.builder.executor",
    "wf": "dockbuilder.builder.workflow",
    "flow": "dockbuilder.builder.workflow",
    "args": "dockbuilder.builder.args",
    "cache": "dockbuilder.cache",
    "cc": "dockbuilder.cache",
    "conf": "dockbuilder.config",
    "access": "dockbuilder.access",
    "daemon": "dockbuilder.access.daemon",
    "query": "dockbuilder.access.query",
    "archive": "dockbuilder.access.archive",
}

# Top-level modules within dockbuilder for auto-prefixing
KNOWN_TOP_MODULES = {
    "builder",
    "access",
    "cache",
    "datacls",
    "images",
    "utils",
    "exceptions",
    "config",
    "factories",
}

LOG_LEVELS_ENV = "DOCKB_LOG_LEVELS"

# --- Shared property store ---
# Key under which the serialized pull cache lives for the whole run
PULL_CACHE_KEY = "CONTEXT_KEY_PREVIOUSLY_PULLED"

# --- Build arguments ---
BUILD_ARG_PREFIX = "docker.buildArg."
NOCACHE_PROPERTY = "docker.nocache"

# --- Base images ---
# Neither of these is ever pulled
SCRATCH_IMAGE = "scratch"
DEFAULT_DATA_BASE_IMAGE = SCRATCH_IMAGE

LATEST_TAG = "latest"

# --- Filenames ---
DOCKERFILE_NAME = "Dockerfile"
ARCHIVE_FILENAME = "docker-build.tar"
DEFAULT_OUTPUT_DIR = "target/docker"

# --- Assembly defaults ---
DEFAULT_ASSEMBLY_NAME = "build"
