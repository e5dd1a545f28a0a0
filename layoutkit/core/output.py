import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator
import structlog
from layoutkit.exceptions import OutputError

log = structlog.get_logger(__name__)

@contextmanager
def stdout_sink() -> Iterator[BinaryIO]:
    # yields stdout as a binary sink so rendered chunks stream straight through.
    stream = sys.stdout.buffer
    try:
        yield stream
    finally:
        stream.flush()

def write_to_file(output_file_path: Path, content: bytes):
    # writes fully rendered content in one go; nothing is created before that.
    log.info("writing_output_to_file", path=str(output_file_path), size=len(content))
    try:
        output_file_path.write_bytes(content)
    except OSError as e:
        raise OutputError(f"failed to write to file '{output_file_path}': {e}") from e
