from typing import Iterator, List, Sequence
import pathspec
import structlog

from layoutkit.core.discovery.pattern_matching import compile_glob_patterns, matches_any
from layoutkit.core.sources.base import FileSource

log = structlog.get_logger(__name__)

def discover_templates(source: FileSource, patterns: Sequence[str], root: str = ".") -> Iterator[str]:
    # yields the paths of matching files, in the source's walk order.
    # patterns are compiled eagerly so a bad pattern fails before any walking.
    specs = compile_glob_patterns(patterns)
    log.info("template_discovery_started", source=repr(source), root=root, patterns=list(patterns))
    return _iter_matching_paths(source, specs, root)

def _iter_matching_paths(source: FileSource, specs: List[pathspec.PathSpec], root: str) -> Iterator[str]:
    matched_count = 0
    for entry in source.list(root):
        if entry.is_dir:
            continue
        if not matches_any(entry.path, specs):
            log.debug("template_candidate_skipped", path=entry.path)
            continue
        matched_count += 1
        yield entry.path

    log.info("template_discovery_complete", matched=matched_count)
