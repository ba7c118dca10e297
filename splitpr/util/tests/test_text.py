import io
from pathlib import Path

from splitpr.util.text import decode_bytes, encode_text, read_stdin_text, read_text_file


def test_invalid_utf8_survives_round_trip() -> None:
    data = b"--- a/caf\xe9.txt\n+++ b/caf\xe9.txt\n"
    assert encode_text(decode_bytes(data)) == data


def test_read_stdin_text_from_stream() -> None:
    stream = io.BytesIO(b"line one\r\nline two\n")
    assert read_stdin_text(stream) == "line one\r\nline two\n"


def test_read_text_file_keeps_crlf(tmp_path: Path) -> None:
    path = tmp_path / "in.diff"
    path.write_bytes(b"a\r\nb\r\n")
    assert read_text_file(path) == "a\r\nb\r\n"
