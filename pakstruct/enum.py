from enum import IntEnum


class Status(IntEnum):
    '''Outcome of a run, it's used as the exit code of the scripts'''
    SUCCESS             = 0
    INVALID_INPUT       = 1
    IO_ERROR            = 2
    FORMAT_ERROR        = 3
    UNSUPPORTED_FORMAT  = 4
    UNSUPPORTED_FEATURE = 5
    CORRUPT_DATA        = 6
