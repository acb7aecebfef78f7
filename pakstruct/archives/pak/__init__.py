'''
# Kingdoms of Amalur PAK format

The general structure is the following
  .---------------------------------.
  | header                          |
  | compressed block 1              |
  | compressed block 2              |
    ...
  | compressed block N              |
  | name table                      |
  | entries table                   |
  '---------------------------------'

The header points to the entries table with an absolute offset; each entry
points to its block with a "position" expressed in units of the header's
alignment. The name table is addressed like any other entry and, being the
last block written, is the one with the greatest position.

A compressed block starts with the decompressed size and the number of chunks,
followed by the compressed size of each chunk and then the chunks themselves;
every chunk is an independent aPLib stream.

The name table starts with its size in bytes and is a sequence of
(content id, length, name) records; the content id links a name to an entry.

Not all the variants are handled: the signature tells the endianess and
whether the blocks are compressed, only the little endian "Kaiko" one is
supported.
'''
from enum import Enum

from ...core import Chunk
from ... import fields
from ...properties import Dependency
from ...exceptions import CorruptDataException


class PakFileType(Enum):
    COMPRESSED_BE       = 0x4B504B62
    COMPRESSED_LE       = 0x6C4B504B
    UNCOMPRESSED_BE     = 0x624B4150
    UNCOMPRESSED_LE     = 0x6C4B4150
    KAIKO_COMPRESSED_BE = 0x6252414B
    KAIKO_COMPRESSED_LE = 0x6C52414B


class PakHeader(Chunk):
    '''The alignment scales the entries' position into a byte offset, the chunk
    unit is the granularity used for the decompression blocks (0x10 and 0x100
    in the archives shipped with the game).'''
    signature      = fields.StructField('I', enum=PakFileType, default=PakFileType.KAIKO_COMPRESSED_LE)
    valid          = fields.StructField('I')
    alignment      = fields.StructField('I', default=0x10)
    chunk_unit     = fields.StructField('I', default=0x100)
    entries_offset = fields.StructField('Q')
    reserved0      = fields.StructField('I')
    reserved1      = fields.StructField('I')

    @property
    def format(self):
        '''The PakFileType of the archive or None if the signature is unknown'''
        signature = self.signature.value
        return signature if isinstance(signature, PakFileType) else None


class PakFileEntry(Chunk):
    content_id = fields.StructField('I')  # links to the name table
    position   = fields.StructField('I')  # in units of PakHeader.alignment
    file_size  = fields.StructField('I')

    def __str__(self):
        return '(id: %08X)(pos: %08X)(size: %08X)' % (
            self.content_id.value,
            self.position.value,
            self.file_size.value,
        )


class PakEntriesTable(Chunk):
    '''The special entries follow the regular ones, only their number is read.'''
    entries_count = fields.StructField('I')
    special_count = fields.StructField('I')
    entries       = fields.ArrayField(PakFileEntry(), n=Dependency('.entries_count'))


class PakNameRecord(Chunk):
    content_id  = fields.StructField('I')
    name_length = fields.StructField('I')
    filename    = fields.StringField(Dependency('.name_length'))


class PakNameTable(Chunk):
    table_size = fields.StructField('I')
    reserved   = fields.StructField('I')
    records    = fields.ArrayField(PakNameRecord(), total_size=Dependency('.table_size'))

    def validate(self):
        if self.table_size.value == 0:
            raise CorruptDataException('the name table is declared with zero size')

    def get_mapping(self):
        '''Dictionary from content id to name, the last record wins on duplicates'''
        return {
            record.content_id.value: record.filename.value.decode('utf-8', errors='surrogateescape')
            for record in self.records
        }


class PakBlockHeader(Chunk):
    '''The compressed chunks follow, they are read one at the time by the extractor.'''
    decompressed_size = fields.StructField('I')
    chunks_count      = fields.StructField('I')
    chunks_sizes      = fields.ArrayField(fields.StructField('I'), n=Dependency('.chunks_count'))
