# layoutkit/core/discovery/pattern_matching.py
from typing import List, Sequence
import pathspec
import structlog

from layoutkit.exceptions import PatternError

log = structlog.get_logger(__name__)

# gitignore syntax that has no meaning for a plain base-name glob.
GITIGNORE_ONLY_PREFIXES = ("!", "#")

def _check_base_name_glob(pattern: str):
    # base names never contain a separator, and gitwildmatch would silently
    # turn these forms into comments, negations or stripped text.
    if not isinstance(pattern, str) or not pattern.strip():
        raise PatternError(f"invalid glob pattern: {pattern!r}")
    if pattern.startswith(GITIGNORE_ONLY_PREFIXES):
        raise PatternError(f"glob pattern {pattern!r} may not start with {pattern[0]!r}")
    if pattern != pattern.strip():
        raise PatternError(f"glob pattern {pattern!r} has leading or trailing whitespace")
    if "/" in pattern:
        raise PatternError(f"glob pattern {pattern!r} contains '/'; patterns match base names only")

def compile_glob_patterns(glob_patterns: Sequence[str]) -> List[pathspec.PathSpec]:
    # compiles each glob pattern on its own so matching can stop at the first hit.
    if not glob_patterns:
        raise PatternError("at least one glob pattern is required")
    compiled: List[pathspec.PathSpec] = []
    for pattern in glob_patterns:
        _check_base_name_glob(pattern)
        try:
            compiled.append(pathspec.PathSpec.from_lines("gitwildmatch", [pattern]))
        except Exception as e:
            raise PatternError(f"error compiling glob pattern {pattern!r}: {e}") from e
    log.debug("glob_patterns_compiled", patterns=list(glob_patterns))
    return compiled

def base_name(path: str) -> str:
    return path.rsplit("/", 1)[-1]

def matches_any(path: str, specs: Sequence[pathspec.PathSpec]) -> bool:
    # patterns apply to the base name only, never to the directory part.
    name = base_name(path)
    for spec in specs:
        if spec.match_file(name):
            return True
    return False
