import sys
from pathlib import Path
from typing import BinaryIO

# surrogateescape lets bytes that are not valid UTF-8 pass through the
# splitter and come back out unchanged.
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def decode_bytes(data: bytes) -> str:
    return data.decode(TEXT_ENCODING, errors=TEXT_ERRORS)


def encode_text(text: str) -> bytes:
    return text.encode(TEXT_ENCODING, errors=TEXT_ERRORS)


def read_text_file(path: Path) -> str:
    return decode_bytes(Path(path).read_bytes())


def read_stdin_text(stream: BinaryIO | None = None) -> str:
    if stream is None:
        stream = sys.stdin.buffer
    return decode_bytes(stream.read())
