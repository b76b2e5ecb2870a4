"""Constants for the configuration module."""

# Validation result values
VALIDATION_PASSED = "PASSED"
VALIDATION_FAILED = "FAILED"

# Log component names
COMPONENT_CONFIG = "config"
COMPONENT_CLI = "cli"
COMPONENT_IMPORTER = "importer"
COMPONENT_QUEUE = "queue_builder"
COMPONENT_SELECTOR = "selector"
COMPONENT_LAYOUT = "layout"
COMPONENT_EDITION = "edition"

# File type identifiers
FILE_TYPE_NEWSPAPER = "newspaper"
FILE_TYPE_POOLS = "pools"
FILE_TYPE_PRESETS = "presets"
FILE_TYPE_VISUAL_KEYS = "visual_keys"

# Default file names inside a config directory
NEWSPAPER_FILE = "newspaper.yaml"
POOLS_FILE = "pools.yaml"
PRESETS_FILE = "presets.yaml"
VISUAL_KEYS_FILE = "visual_keys.yaml"

# Agency ids: 0 = agency A, 1 = agency B, 2 = featured, 3 = random filler
IMPORTANT_AGENCY_IDS = (0, 1)
SUPPORT_AGENCY_IDS = (2, 3)
