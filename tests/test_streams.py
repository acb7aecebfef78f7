import io

import pytest

from pakstruct.streams import Stream
from pakstruct.exceptions import StreamException


def test_bytes_stream():
    stream = Stream(b'\x01\x02\x03\x04\x05')

    assert stream.size == 5
    assert stream.read(1) == b'\x01'
    assert stream.read_exactly(2) == b'\x02\x03'
    assert stream.tell() == 3

    with pytest.raises(StreamException):
        stream.read_exactly(3)


def test_file_stream(tmp_path):
    path = tmp_path / 'data.bin'
    path.write_bytes(b'\x01\x02\x03\x04\x05')

    with Stream(str(path)) as stream:
        assert stream.size == 5
        assert stream.seek(3).read(2) == b'\x04\x05'

    # a pathlib.Path works too
    with Stream(path) as stream:
        assert stream.read_exactly(5) == b'\x01\x02\x03\x04\x05'


def test_missing_file(tmp_path):
    with pytest.raises(StreamException):
        Stream(str(tmp_path / 'missing.pak'))


def test_file_object_is_not_closed():
    obj = io.BytesIO(b'abcdef')

    with Stream(obj) as stream:
        stream.seek(2)
        assert stream.read(2) == b'cd'

    assert not obj.closed


def test_wrong_object():
    with pytest.raises(ValueError):
        Stream(42)


def test_size_preserves_position():
    stream = Stream(b'abcdef')
    stream.seek(4)

    assert stream.size == 6
    assert stream.tell() == 4

    with stream.saved():
        stream.seek(0)
        assert stream.read(1) == b'a'

    assert stream.tell() == 4
