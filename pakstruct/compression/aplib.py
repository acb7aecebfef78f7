'''
# aPLib

LZ77-based compression by Joergen Ibsen, used to store the chunks of the
compressed PAK archives.

There is no header: the first byte of the stream is a literal, then control
bits and data bytes are interleaved into the same stream. The control bits
are read MSB first from a "tag" byte fetched from the current position every
time the previous one runs out, so a tag byte can sit between two literals.

The possible codes are

  .------------------------------------------------------------------------.
  | 0          | literal: the next byte is copied as is                    |
  | 10         | gamma coded offset (high bits) + byte (low bits) + gamma  |
  |            | coded length, or the last offset if the gamma value is 2  |
  |            | right after a literal                                     |
  | 110        | one byte: 7 bits of offset and 1 bit of length (2 or 3),  |
  |            | an offset of zero marks the end of the stream             |
  | 111        | 4 bits of offset for a single byte (zero means 0x00)      |
  '------------------------------------------------------------------------'

The gamma code starts from 1 and, for each couple of bits read, shifts in the
first one while the second one is set.
'''
import logging

from bitstring import Bits

from ..exceptions import DecompressionException


logger = logging.getLogger(__name__)

MAX_CHUNK_SIZE = 0x1000


class BitReader(object):
    '''Cursor over the compressed data handing out both control bits and bytes.'''

    def __init__(self, data: bytes, start=0):
        self._data = data
        self.position = start
        self._tag = iter(())

    def read_byte(self) -> int:
        if self.position >= len(self._data):
            raise DecompressionException('compressed data exhausted at offset %d' % self.position)

        value = self._data[self.position]
        self.position += 1

        return value

    def read_bit(self) -> int:
        bit = next(self._tag, None)

        if bit is None:
            self._tag = iter(Bits(uint=self.read_byte(), length=8))
            bit = next(self._tag)

        return int(bit)

    def read_bits(self, n: int) -> int:
        value = 0
        for _ in range(n):
            value = (value << 1) | self.read_bit()

        return value

    def read_gamma(self) -> int:
        value = 1
        while True:
            value = (value << 1) | self.read_bit()
            if not self.read_bit():
                return value


def _copy_match(output: bytearray, offset: int, length: int, max_size: int):
    if offset == 0 or offset > len(output):
        raise DecompressionException('invalid back-reference at offset %d with %d bytes decompressed' % (
            offset, len(output)))

    # nothing is copied if the match doesn't fit
    if len(output) + length > max_size:
        raise DecompressionException('a match of %d bytes goes past %d bytes' % (length, max_size))

    # the source can overlap the destination, so one byte at the time
    for _ in range(length):
        output.append(output[-offset])


def depack(data: bytes, max_size=MAX_CHUNK_SIZE) -> bytes:
    '''Decompress a single aPLib stream, failing if it expands past "max_size" bytes.'''
    if not data:
        return b''

    output = bytearray(data[:1])
    reader = BitReader(data, start=1)

    last_offset = 0
    last_was_match = False

    while True:
        if not reader.read_bit():
            output.append(reader.read_byte())
            last_was_match = False
        elif not reader.read_bit():
            offset = reader.read_gamma()

            if not last_was_match and offset == 2:
                offset = last_offset
                length = reader.read_gamma()
            else:
                offset -= 2 if last_was_match else 3
                offset = (offset << 8) | reader.read_byte()
                length = reader.read_gamma()

                if offset >= 32000:
                    length += 1
                if offset >= 1280:
                    length += 1
                if offset < 128:
                    length += 2

                last_offset = offset

            _copy_match(output, offset, length, max_size)
            last_was_match = True
        elif not reader.read_bit():
            value = reader.read_byte()
            length = 2 + (value & 1)
            offset = value >> 1

            if offset == 0:
                break

            _copy_match(output, offset, length, max_size)
            last_offset = offset
            last_was_match = True
        else:
            offset = reader.read_bits(4)

            if offset == 0:
                output.append(0)
            else:
                _copy_match(output, offset, 1, max_size)

            last_was_match = False

        if len(output) > max_size:
            raise DecompressionException('decompressed data goes past %d bytes' % max_size)

    logger.debug('depacked %d bytes into %d' % (len(data), len(output)))

    return bytes(output)
