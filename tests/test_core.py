import pytest

from pakstruct.core import Chunk
from pakstruct.fields import StructField, StringField, ArrayField
from pakstruct.properties import Dependency
from pakstruct.exceptions import StreamException


def test_chunk():
    """Check that building a Chunk from fields behaves correctly."""
    class Dummy(Chunk):
        a = StructField('I', default=0xbad)
        b = StringField(0x10)
        c = StructField('I', default=0xdeadbeef)

    dummy = Dummy()

    assert dummy.a.size == 4
    assert dummy.a.raw == b'\xad\x0b\x00\x00'
    assert dummy.a.value == 0xbad
    assert dummy.a.offset == 0x00
    assert dummy.a.father == dummy

    assert dummy.b.size == 0x10
    assert dummy.b.raw == b'\x00' * 0x10
    assert dummy.b.offset == 0x04

    assert dummy.c.size == 0x4
    assert dummy.c.raw == b'\xef\xbe\xad\xde'
    assert dummy.c.offset == 0x14

    assert dummy.size == 0x18
    assert len(dummy.raw) == dummy.size
    assert dummy.raw == (
        b'\xad\x0b\x00\x00' +
        b'\x00' * 0x10 +
        b'\xef\xbe\xad\xde'
    )


def test_instances_do_not_share_fields():
    class Dummy(Chunk):
        a = StructField('I')

    first, second = Dummy(), Dummy()
    first.a.value = 0xcafe

    assert first.a is not second.a
    assert second.a.value == 0


def test_chunk_w_dependencies():
    class Example(Chunk):
        sz = StructField('I')
        data = StringField(Dependency('.sz'))

    example = Example(b'\x05\x00\x00\x00kebab' + b'trailing')

    assert list(example.data.get_dependencies().keys()) == [
        'length',
    ]

    assert example.sz.value == 5
    assert example.data.value == b'kebab'
    assert example.size == 9
    assert example.sz.offset == 0
    assert example.data.offset == 4


def test_inheritance():
    '''subclasses inherit fields'''
    class Father(Chunk):
        field_a = StringField(0x10)
        field_b = StructField("I")

    class Son(Father):
        field_c = StringField(0x08)

    field_b_value = b'\x01\x02\x03\x04'
    field_c_value = b'ABCDEFGH'
    son = Son(b'A' * 16 + field_b_value + field_c_value)

    assert son.get_ordered_fields_name() == [
        'field_a', 'field_b', 'field_c',
    ]

    assert son.field_b.value == 0x04030201, f'field_b is {son.field_b.value:x}'
    assert son.field_c.value == field_c_value


def test_nested_chunk():
    class Inner(Chunk):
        x = StructField('H')
        y = StructField('H')

    class Outer(Chunk):
        magic = StringField(4)
        inner = Inner()

    outer = Outer(b'MAGI\x01\x00\x02\x00')

    assert outer.inner.father is outer
    assert outer.inner.x.value == 1
    assert outer.inner.y.value == 2
    assert outer.inner.offset == 4
    assert outer.raw == b'MAGI\x01\x00\x02\x00'


def test_unpack_failure_has_chain():
    """The exception raised by a field tells where it happened."""
    class Record(Chunk):
        length = StructField('I')
        text = StringField(Dependency('.length'))

    class Table(Chunk):
        count = StructField('I')
        records = ArrayField(Record(), n=Dependency('.count'))

    data = b'\x02\x00\x00\x00' + b'\x01\x00\x00\x00a' + b'\x05\x00\x00\x00ab'

    with pytest.raises(StreamException) as excinfo:
        Table(data)

    assert excinfo.value.chain == ['text', '1', 'records']
    assert 'records.1.text' in str(excinfo.value)


def test_validate_hook():
    class Checked(Chunk):
        magic = StructField('B')

        def validate(self):
            if self.magic.value != 0x42:
                raise ValueError('wrong magic')

    assert Checked(b'\x42').magic.value == 0x42

    with pytest.raises(ValueError):
        Checked(b'\x00')


def test_field_shadowing_chunk_attribute():
    with pytest.raises(AttributeError):
        class Named(Chunk):
            name = StringField(4)

    with pytest.raises(AttributeError):
        class Sized(Chunk):
            size = StructField('I')


def test_dependency_into_sub_chunk():
    """Components after the first one descend into the sub-chunks."""
    class Header(Chunk):
        length = StructField('B')

    class Message(Chunk):
        header = Header()
        text = StringField(Dependency('.header.length'))

    message = Message(b'\x03abcd')

    assert message.text.value == b'abc'
    assert message.size == 4


def test_dependency_must_be_relative():
    with pytest.raises(ValueError):
        Dependency('length')

    with pytest.raises(ValueError):
        Dependency('.')
