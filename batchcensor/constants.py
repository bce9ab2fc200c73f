"""Constants used throughout batchcensor."""

# Configuration discovery
DEFAULT_CONFIG_FILENAMES = ("batchcensor.yml", "batchcensor.yaml")
CONFIG_EXTENSIONS = (".yml", ".yaml")

# Environment overrides for CLI defaults
ENV_ROOT = "BATCHCENSOR_ROOT"
ENV_OUTPUT = "BATCHCENSOR_OUTPUT"
ENV_CONFIG_DIR = "BATCHCENSOR_CONFIG_DIR"
ENV_JOBS = "BATCHCENSOR_JOBS"

# Output layout
DEFAULT_OUTPUT_DIRNAME = "output"
WAV_EXTENSION = ".wav"
SIDECAR_EXTENSION = ".oac"

# Timecodes
OPEN_START = "^"
OPEN_END = "$"
MAX_SAMPLE_OFFSET = 2 ** 32 - 1

# Audio processing parameters
SAMPLE_WIDTH_BYTES = 2
TONE_FREQUENCY = 1000.0
TONE_AMPLITUDE = 0.3

# Init workflow
MISSING_TRANSCRIPT = "[missing]"

# Manifest
MANIFEST_ARCHIVE_ROOT = "x64/audio/sfx"
MANIFEST_ARCHIVE_TYPE = "RPF7"
MANIFEST_AUDIO_EXTENSION = ".awc"
