#!/usr/bin/env python3
'''
Dump all the files contained into a Kingdoms of Amalur: Re-Reckoning PAK archive
under the "dump" directory.

The exit code tells how it went, see pakstruct.enum.Status.
'''
import os
import sys
import logging

from pakstruct.archives.pak.extract import extract, DirectoryWriter


OUTPUT_DIRECTORY = 'dump'

logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print('usage: %s <pak file>' % progname)
    sys.exit(1)


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]

    report = extract(path, DirectoryWriter(OUTPUT_DIRECTORY))

    logger.info(f'{len(report.files)} files saved, {len(report.failures)} failed: {report.status.name}')

    sys.exit(report.status.value)
