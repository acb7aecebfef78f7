'''
Extraction of the files contained into a PAK archive.

The work is split in small functions, one for each table of the archive, so
that each one can be used (and tested) by itself:

    header  = read_header(stream)
    handler = get_handler(header)
    report  = handler(stream, header, output)

extract() does all of the above starting from a path, some bytes or a file
object; the output is any callable accepting a DecodedFile, like an instance
of DirectoryWriter.
'''
import os
import logging
from typing import Callable, Dict, Iterator, List, Tuple

from . import (
    PakFileType,
    PakHeader,
    PakFileEntry,
    PakEntriesTable,
    PakNameTable,
    PakBlockHeader,
)
from ...compression import aplib
from ...enum import Status
from ...streams import Stream
from ...exceptions import (
    PakException,
    InvalidInputException,
    StreamException,
    FormatException,
    CorruptDataException,
    UnsupportedFormatException,
    UnsupportedFeatureException,
)


logger = logging.getLogger(__name__)

UNKNOWN_FILE_FORMAT = '%08X.unknown_file'


class DecodedFile(object):

    def __init__(self, name: str, data: bytes):
        self.name = name
        self.data = data

    def __repr__(self):
        return '<%s(%s, %d bytes)>' % (self.__class__.__name__, self.name, len(self.data))


class ExtractionReport(object):
    '''What happened during a run.

    The status gives precedence to the error that aborted the run, then to the
    first entry that failed and at last to the unsupported features that have
    been skipped.'''

    def __init__(self):
        self.files: List[str] = []
        self.failures: List[Tuple[str, PakException]] = []
        self.warnings: List[PakException] = []
        self.error = None

    def __repr__(self):
        return '<%s(%s, files=%d, failures=%d)>' % (
            self.__class__.__name__, self.status.name, len(self.files), len(self.failures))

    @property
    def status(self) -> Status:
        if self.error is not None:
            return self.error.status

        if self.failures:
            return self.failures[0][1].status

        if self.warnings:
            return self.warnings[0].status

        return Status.SUCCESS


def _safe_relpath(name: str) -> str:
    '''Names come from the archive: no absolute paths, drive letters or parent directories.'''
    name = name.replace('\\', '/')
    if len(name) >= 2 and name[1] == ':':
        name = name[2:]

    parts = [_ for _ in name.split('/') if _ not in ('', '.', '..')]

    return os.path.join(*parts) if parts else ''


class DirectoryWriter(object):
    '''Save each DecodedFile under a directory, created if absent.'''

    def __init__(self, path):
        self.path = path

    def __call__(self, decoded: DecodedFile) -> str:
        relpath = _safe_relpath(decoded.name)
        if not relpath:
            raise StreamException('\'%s\' is not a valid file name' % decoded.name)

        path = os.path.join(self.path, relpath)
        directory = os.path.dirname(path)

        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(path, 'wb') as f:
                f.write(decoded.data)
        except OSError as e:
            raise StreamException('failed to dump file \'%s\': %s' % (path, e.strerror))

        return path


def read_header(stream: Stream) -> PakHeader:
    '''Read the header from the start of the stream, checking it's there at all.'''
    header_size = PakHeader().size
    stream_size = stream.size

    if stream_size < header_size:
        raise FormatException('invalid file size %d: a PAK header needs %d bytes' % (stream_size, header_size))

    stream.seek(0)

    return PakHeader(stream)


def sort_entries(entries: List[PakFileEntry]) -> List[PakFileEntry]:
    '''Order by position, the original order is kept on ties.'''
    return sorted(entries, key=lambda entry: entry.position.value)


def read_entries(stream: Stream, header: PakHeader) -> Tuple[List[PakFileEntry], int]:
    '''Return the entries sorted by position and the number of special entries.'''
    stream.seek(header.entries_offset.value)

    table = PakEntriesTable(stream)

    logger.info('Entry Count: %d' % table.entries_count.value)
    logger.info('Entry Count: %d (Special)' % table.special_count.value)

    for entry in table.entries:
        logger.debug('entry found: %s' % entry)

    return sort_entries(table.entries.value), table.special_count.value


def read_names(stream: Stream, header: PakHeader, locator: PakFileEntry) -> Dict[int, str]:
    '''Parse the name table pointed by "locator" into a mapping from content id to name.'''
    stream.seek(locator.position.value * header.alignment.value)

    table = PakNameTable(stream)

    logger.debug('name table with %d records in 0x%x bytes' % (len(table.records), table.table_size.value))

    return table.get_mapping()


def resolve_name(entry: PakFileEntry, names: Dict[int, str], unknown_count: int) -> Tuple[str, int]:
    '''Return the name for the entry and the updated count of the unnamed ones.'''
    name = names.get(entry.content_id.value)

    if not name:
        name = UNKNOWN_FILE_FORMAT % unknown_count
        unknown_count += 1

    return name, unknown_count


def read_compressed_file(stream: Stream, offset: int, max_chunk_size=aplib.MAX_CHUNK_SIZE) -> bytes:
    '''Read the block at "offset" and decompress its chunks one after the other.'''
    stream.seek(offset)

    block = PakBlockHeader(stream)

    data = bytearray()
    for chunk_size in block.chunks_sizes:
        data += aplib.depack(stream.read_exactly(chunk_size.value), max_size=max_chunk_size)

    if len(data) != block.decompressed_size.value:
        logger.warning('block at offset 0x%x declares %d bytes but %d have been decompressed' % (
            offset, block.decompressed_size.value, len(data)))

    return bytes(data)


def iter_files(stream: Stream, header: PakHeader, entries: List[PakFileEntry],
               names: Dict[int, str], report: ExtractionReport) -> Iterator[DecodedFile]:
    '''Decode the entries in the given order; the ones that fail are logged,
    recorded into the report and skipped.'''
    unknown_count = 0

    for entry in entries:
        name, unknown_count = resolve_name(entry, names, unknown_count)

        try:
            data = read_compressed_file(stream, entry.position.value * header.alignment.value)
        except (StreamException, CorruptDataException) as e:
            logger.error('failed to extract \'%s\': %s' % (name, e))
            report.failures.append((name, e))
            continue

        if len(data) != entry.file_size.value:
            logger.warning('entry \'%s\' declares %d bytes but %d have been decompressed' % (
                name, entry.file_size.value, len(data)))

        yield DecodedFile(name, data)


def extract_kaiko_compressed(stream: Stream, header: PakHeader, output: Callable[[DecodedFile], object],
                             report: ExtractionReport = None) -> ExtractionReport:
    '''Handler for PakFileType.KAIKO_COMPRESSED_LE archives.'''
    report = report if report is not None else ExtractionReport()

    if header.valid.value == 0:
        raise FormatException('the header is flagged as not valid')

    logger.info('Processing PAK file type: Kaiko Compressed (Little Endian)')

    entries, special_count = read_entries(stream, header)

    if special_count > 0:
        warning = UnsupportedFeatureException('%d special entries are not supported' % special_count)
        logger.warning(str(warning))
        report.warnings.append(warning)

    if not entries:
        return report

    # the name table is the last block of the archive
    locator = entries.pop()
    names = read_names(stream, header, locator)

    for decoded in iter_files(stream, header, entries, names, report):
        logger.info('Saving file: %s' % decoded.name)
        try:
            output(decoded)
        except StreamException as e:
            logger.error(str(e))
            report.failures.append((decoded.name, e))
            continue

        report.files.append(decoded.name)

    return report


FORMAT_HANDLERS = {
    PakFileType.KAIKO_COMPRESSED_LE: extract_kaiko_compressed,
}


def get_handler(header: PakHeader) -> Callable:
    handler = FORMAT_HANDLERS.get(header.format)

    if handler is None:
        raise UnsupportedFormatException('PAK file type unsupported (signature 0x%08x)' % (
            header.signature.value.value if header.format else header.signature.value))

    return handler


def extract(source, output: Callable[[DecodedFile], object]) -> ExtractionReport:
    '''Extract everything possible from the archive, failures are reported and never raised.'''
    report = ExtractionReport()

    if isinstance(source, (str, os.PathLike)) and not os.path.isfile(source):
        report.error = InvalidInputException('\'%s\' is not a file' % os.fspath(source))
        logger.error(str(report.error))
        return report

    try:
        with Stream(source) as stream:
            header = read_header(stream)
            handler = get_handler(header)
            handler(stream, header, output, report=report)
    except PakException as e:
        logger.error(str(e))
        report.error = e

    return report
