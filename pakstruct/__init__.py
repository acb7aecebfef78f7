"""
# pakstruct: game archives for humans.

We can define a file format as a way of describing a binary representation of something
digital, where each subcomponent of the file format aims to represent a specific aspect
of the digital artefact.

The subcomponents are described declaratively: a Chunk is made of Fields, each one
knows how many bytes it needs and how to decode them, and a field can depend on another
one (like a string whose length is stored just before it).

The main operation defined for the file format and its sub components is

 1. unpack(): read the binary data from a stream and build a high-level representation
    of that. The offset is the actual offset of the stream and the chunk itself knows
    how many bytes needs to read to finalize the representation.

and, to build data by hand,

 2. raw: encode the high-level representation back into binary data.

On top of that live the archive formats, right now the PAK archives of
Kingdoms of Amalur: Re-Reckoning (see pakstruct.archives.pak) with the aPLib
decompression of their chunks (see pakstruct.compression.aplib).

"""
