#!/usr/bin/env python3
'''
List the content of a PAK archive without extracting anything, like

 $ pakinfo.py initial_0.pak
'''
import os
import sys
import logging

from pakstruct.streams import Stream
from pakstruct.exceptions import PakException
from pakstruct.archives.pak.extract import (
    read_header,
    get_handler,
    read_entries,
    read_names,
    resolve_name,
)

logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.WARNING)


def usage(progname):
    print('usage: %s <pak file>' % progname)
    sys.exit(1)


def dump_header(hdr):
    print(f'''PAK Header:
  Signature:                         {hdr.signature.value!r}
  Valid:                             {hdr.valid.value}
  Alignment:                         0x{hdr.alignment.value:x}
  Chunk unit:                        0x{hdr.chunk_unit.value:x}
  Entries offset:                    0x{hdr.entries_offset.value:x}''')


def dump_entries(hdr, entries, names):
    print(f'''Entries:
  [Nr]  Id       Offset     Size       Name''')
    unknown_count = 0
    for idx, entry in enumerate(entries):
        name, unknown_count = resolve_name(entry, names, unknown_count)
        offset = entry.position.value * hdr.alignment.value
        print(f'''  [{idx: >4d}] {entry.content_id.value:08X} 0x{offset:08x} 0x{entry.file_size.value:08x} {name}''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    try:
        with Stream(sys.argv[1]) as stream:
            header = read_header(stream)
            dump_header(header)

            get_handler(header)

            entries, special_count = read_entries(stream, header)
            print(f'\n{len(entries)} entries ({special_count} special, not listed)\n')

            names = {}
            if entries:
                names = read_names(stream, header, entries.pop())

            dump_entries(header, entries, names)
    except PakException as e:
        print(f'error: {e}')
        sys.exit(e.status.value)
