"""Protocol layer: chunk framing, command builders, reply parsing, lock words and inventory."""

from .framing import build_chunks, read_response, send_command
from .commands import Command, TagCommand
from .interface import ReaderInterface
from .lock import LockPatternBuilder
