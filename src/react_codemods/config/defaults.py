"""Default configurations for react-codemods."""

from pathlib import Path

# Source extensions the engine understands
DEFAULT_FILE_EXTENSIONS = [
    ".js",  # JavaScript (JSX allowed)
    ".jsx",  # React JSX
    ".ts",  # TypeScript
    ".tsx",  # React TSX
]

# Only these can hold JSX, used by the component profiler
JSX_FILE_EXTENSIONS = [".jsx", ".tsx"]

# tree-sitter grammar per extension
LANGUAGE_MAPPINGS: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

# Directories never descended into
DEFAULT_IGNORE_DIRS = [
    "node_modules",
    "build",
    "dist",
]

# Substrings / suffixes of file names never processed
DEFAULT_IGNORE_FILE_PATTERNS = [
    "*.test.*",
    "*.spec.*",
    "*.d.ts",
]

# Module the tracked hooks must be imported from
DEFAULT_HOOK_MODULE = "react"
DEFAULT_STATE_HOOK = "useState"
DEFAULT_EFFECT_HOOK = "useEffect"

# Generated code
DEFAULT_LOG_FUNCTION = "console.log"
DEFAULT_QUOTE_STYLE = "single"
EFFECT_COUNTER_PREFIX = "effectCallCount_"

# Profiler wrapper
DEFAULT_PROFILER_TAG = "Profiler"
DEFAULT_PROFILER_CALLBACK = "onRenderCallback"

# Sentinels used when no owning function can be resolved
UNKNOWN_COMPONENT = "Unknown Component"
UNKNOWN_EFFECT_OWNER = "Unknown"
GLOBAL_OWNER = "global"

# Parsing toolchain, checked before any file I/O
REQUIRED_MODULES = {
    "tree_sitter": "tree-sitter",
    "tree_sitter_language_pack": "tree-sitter-language-pack",
}

CONFIG_FILE_NAME = ".react-codemods.yaml"


def get_default_config_path(project_root: Path) -> Path:
    """Get the default configuration file path for a project."""
    root = project_root if project_root.is_dir() else project_root.parent
    return root / CONFIG_FILE_NAME


def get_language_from_extension(extension: str) -> str | None:
    """Get the tree-sitter grammar name from a file extension."""
    return LANGUAGE_MAPPINGS.get(extension.lower())
