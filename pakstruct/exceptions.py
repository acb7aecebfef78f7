from .enum import Status


class PakException(Exception):
    '''Base class to extend in order to throw exception in pakstruct.

    It takes an optional argument that represents the chain of the fields
    that caused the exception, innermost first; Chunk.unpack() extends it
    while the exception bubbles up.
    '''
    status = Status.FORMAT_ERROR

    def __init__(self, message='', chain=None):
        self.message = message
        self.chain = chain if chain is not None else []
        super().__init__(message)

    def __str__(self):
        if not self.chain:
            return self.message

        return '%s (at %s)' % (self.message, '.'.join(reversed(self.chain)))


class InvalidInputException(PakException):
    status = Status.INVALID_INPUT


class UnpackException(PakException):
    '''Something went wrong decoding the binary data'''
    status = Status.FORMAT_ERROR


class StreamException(UnpackException):
    '''A seek, read or write against a stream failed or came up short'''
    status = Status.IO_ERROR


class FormatException(UnpackException):
    status = Status.FORMAT_ERROR


class CorruptDataException(UnpackException):
    status = Status.CORRUPT_DATA


class DecompressionException(CorruptDataException):
    pass


class UnsupportedFormatException(PakException):
    status = Status.UNSUPPORTED_FORMAT


class UnsupportedFeatureException(PakException):
    '''This is never raised by the library, it's recorded as a warning when
    part of an archive is skipped.'''
    status = Status.UNSUPPORTED_FEATURE
