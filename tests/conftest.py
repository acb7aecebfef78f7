import struct

import pytest

from pakstruct.archives.pak import PakFileType


NAME_TABLE_ID = 0xffffffff


def aplib_literals(data: bytes) -> bytes:
    '''aPLib stream made only of literals, enough to feed the decompressor'''
    if not data:
        return b''

    out = bytearray(data[:1])
    tag = {'position': 0, 'left': 0}

    def put_bit(bit):
        if tag['left'] == 0:
            tag['position'] = len(out)
            tag['left'] = 8
            out.append(0)
        tag['left'] -= 1
        out[tag['position']] |= bit << tag['left']

    for byte in data[1:]:
        put_bit(0)
        out.append(byte)

    # end of stream
    for bit in (1, 1, 0):
        put_bit(bit)
    out.append(0)

    return bytes(out)


def compressed_block(data: bytes, chunk_size=0x1000, declared_size=None) -> bytes:
    chunks = [aplib_literals(data[_:_ + chunk_size]) for _ in range(0, len(data), chunk_size)]
    declared_size = len(data) if declared_size is None else declared_size

    return (struct.pack('<II', declared_size, len(chunks)) +
            struct.pack('<%dI' % len(chunks), *[len(_) for _ in chunks]) +
            b''.join(chunks))


def name_table(names, table_size=None) -> bytes:
    records = b''.join(struct.pack('<II', content_id, len(name)) + name for content_id, name in names.items())
    table_size = len(records) if table_size is None else table_size

    return struct.pack('<II', table_size, 0) + records


class PakBuilder(object):
    '''Lay out an archive: header, one block for each file, the name table and at last
    the entries table (written in reverse order so that who reads it must sort it).'''

    def __init__(self, signature=PakFileType.KAIKO_COMPRESSED_LE.value, valid=1, alignment=0x10, special_count=0):
        self.signature = signature
        self.valid = valid
        self.alignment = alignment
        self.special_count = special_count
        self.blocks = []
        self.names = {}
        self.name_table_size = None
        self.with_name_table = True

    def add_block(self, content_id, size, block):
        self.blocks.append((content_id, size, block))
        return self

    def add_file(self, content_id, data, name=None, **kwargs):
        if name is not None:
            self.names[content_id] = name.encode()
        return self.add_block(content_id, len(data), compressed_block(data, **kwargs))

    def _align(self, body):
        body += b'\x00' * (-len(body) % self.alignment)

    def build(self) -> bytes:
        body = bytearray(32)
        entries = []

        blocks = list(self.blocks)
        if self.with_name_table:
            blocks.append((NAME_TABLE_ID, 0, name_table(self.names, self.name_table_size)))

        for content_id, size, block in blocks:
            self._align(body)
            entries.append((content_id, len(body) // self.alignment, size))
            body += block

        self._align(body)
        entries_offset = len(body)

        body += struct.pack('<II', len(entries), self.special_count)
        for entry in reversed(entries):
            body += struct.pack('<III', *entry)
        body += b'\xaa' * 12 * self.special_count

        body[:32] = struct.pack('<IIIIQII', self.signature, self.valid, self.alignment, 0x100, entries_offset, 0, 0)

        return bytes(body)


@pytest.fixture
def pak_builder():
    return PakBuilder


@pytest.fixture
def compress():
    return aplib_literals
