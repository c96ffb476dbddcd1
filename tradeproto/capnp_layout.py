"""Minimal Cap'n Proto wire layout: building and reading single-segment messages."""

from __future__ import annotations

import struct

WORD = 8

_STRUCT = 0
_LIST = 1
_FAR = 2

_BYTE_ELEMENTS = 2
_COMPOSITE = 7

_MAX_SEGMENTS = 512
_MAX_LIST_WORDS = (1 << 29) - 1


class CapnpError(ValueError):
    """Raised for malformed messages or out-of-range accesses."""


def _encode_offset(offset: int) -> int:
    return (offset & 0x3FFFFFFF) << 2


def _decode_offset(word: int) -> int:
    raw = (word & 0xFFFFFFFF) >> 2
    return raw - (1 << 30) if raw >= (1 << 29) else raw


def _struct_pointer(offset: int, data_words: int, pointer_count: int) -> int:
    return _encode_offset(offset) | (data_words << 32) | (pointer_count << 48)


def _list_pointer(offset: int, element_size: int, count: int) -> int:
    return _encode_offset(offset) | _LIST | (element_size << 32) | (count << 35)


def _check_struct_size(data_words: int, pointer_count: int) -> None:
    if not (0 <= data_words <= 0xFFFF and 0 <= pointer_count <= 0xFFFF):
        raise CapnpError("Invalid struct size!")


class MessageBuilder:
    """Builds a single-segment message."""

    def __init__(self) -> None:
        self._segment = bytearray(WORD)

    def _allocate(self, words: int) -> int:
        start = len(self._segment)
        self._segment.extend(bytes(words * WORD))
        return start

    def _write_word(self, position: int, value: int) -> None:
        struct.pack_into("<Q", self._segment, position, value)

    def _new_struct(self, pointer_pos: int, data_words: int, pointer_count: int) -> StructBuilder:
        _check_struct_size(data_words, pointer_count)
        start = self._allocate(data_words + pointer_count)
        # A zero-sized struct points just before itself so the pointer is not null.
        offset = -1 if data_words + pointer_count == 0 else (start - pointer_pos - WORD) // WORD
        self._write_word(pointer_pos, _struct_pointer(offset, data_words, pointer_count))
        return StructBuilder(self, start, data_words, pointer_count)

    def init_root(self, data_words: int, pointer_count: int) -> StructBuilder:
        """Create the root struct with the given data and pointer section sizes."""
        return self._new_struct(0, data_words, pointer_count)

    def to_bytes(self) -> bytes:
        """Return the message in stream framing."""
        words = len(self._segment) // WORD
        return struct.pack("<II", 0, words) + bytes(self._segment)


class StructBuilder:
    """Writes the fields of one struct inside a message."""

    def __init__(self, message: MessageBuilder, position: int, data_words: int, pointer_count: int) -> None:
        self._message = message
        self._position = position
        self._data_words = data_words
        self._pointer_count = pointer_count

    @property
    def data_words(self) -> int:
        """Size of the data section in words."""
        return self._data_words

    @property
    def pointer_count(self) -> int:
        """Number of pointers in the pointer section."""
        return self._pointer_count

    def _set(self, fmt: str, offset: int, value: object) -> None:
        width = struct.calcsize(fmt)
        if offset < 0 or (offset + 1) * width > self._data_words * WORD:
            raise CapnpError("Field offset is outside the data section!")
        try:
            struct.pack_into(fmt, self._message._segment, self._position + offset * width, value)
        except struct.error as exc:
            raise CapnpError(str(exc)) from exc

    def set_int32(self, offset: int, value: int) -> None:
        """Set the int32 field at the given element offset."""
        self._set("<i", offset, value)

    def set_uint16(self, offset: int, value: int) -> None:
        """Set the uint16 field at the given element offset."""
        self._set("<H", offset, int(value))

    def set_float64(self, offset: int, value: float) -> None:
        """Set the float64 field at the given element offset."""
        self._set("<d", offset, float(value))

    def _pointer_pos(self, index: int) -> int:
        if not 0 <= index < self._pointer_count:
            raise CapnpError("Pointer index is outside the pointer section!")
        return self._position + self._data_words * WORD + index * WORD

    def set_text(self, index: int, text: str) -> None:
        """Store text in the pointer at the given index."""
        pointer_pos = self._pointer_pos(index)
        encoded = text.encode("utf-8") + b"\0"
        if len(encoded) > _MAX_LIST_WORDS:
            raise CapnpError("Text is too long!")
        start = self._message._allocate((len(encoded) + WORD - 1) // WORD)
        self._message._segment[start : start + len(encoded)] = encoded
        offset = (start - pointer_pos - WORD) // WORD
        self._message._write_word(pointer_pos, _list_pointer(offset, _BYTE_ELEMENTS, len(encoded)))

    def init_struct(self, index: int, data_words: int, pointer_count: int) -> StructBuilder:
        """Create a nested struct in the pointer at the given index."""
        return self._message._new_struct(self._pointer_pos(index), data_words, pointer_count)

    def init_struct_list(
        self, index: int, count: int, data_words: int, pointer_count: int
    ) -> list[StructBuilder]:
        """Create a list of structs in the pointer at the given index."""
        pointer_pos = self._pointer_pos(index)
        _check_struct_size(data_words, pointer_count)
        if count < 0:
            raise CapnpError("Invalid list size!")
        element_words = data_words + pointer_count
        total = count * element_words
        if total > _MAX_LIST_WORDS or count >= (1 << 29):
            raise CapnpError("List is too long!")
        start = self._message._allocate(1 + total)
        self._message._write_word(start, _struct_pointer(count, data_words, pointer_count))
        offset = (start - pointer_pos - WORD) // WORD
        self._message._write_word(pointer_pos, _list_pointer(offset, _COMPOSITE, total))
        first = start + WORD
        return [
            StructBuilder(self._message, first + i * element_words * WORD, data_words, pointer_count)
            for i in range(count)
        ]


class StructReader:
    """Reads the fields of one struct; absent fields read as zero."""

    def __init__(self, segment: bytes, position: int = 0, data_words: int = 0, pointer_count: int = 0) -> None:
        self._segment = segment
        self._position = position
        self._data_words = data_words
        self._pointer_count = pointer_count

    @property
    def data_words(self) -> int:
        """Size of the data section in words."""
        return self._data_words

    @property
    def pointer_count(self) -> int:
        """Number of pointers in the pointer section."""
        return self._pointer_count

    def _get(self, fmt: str, offset: int, default: int | float) -> int | float:
        width = struct.calcsize(fmt)
        if offset < 0:
            raise CapnpError("Invalid field offset!")
        if (offset + 1) * width > self._data_words * WORD:
            return default
        return struct.unpack_from(fmt, self._segment, self._position + offset * width)[0]

    def get_int32(self, offset: int) -> int:
        """Read the int32 field at the given element offset."""
        return int(self._get("<i", offset, 0))

    def get_uint16(self, offset: int) -> int:
        """Read the uint16 field at the given element offset."""
        return int(self._get("<H", offset, 0))

    def get_float64(self, offset: int) -> float:
        """Read the float64 field at the given element offset."""
        return float(self._get("<d", offset, 0.0))

    def _pointer(self, index: int) -> tuple[int, int]:
        if index < 0:
            raise CapnpError("Invalid pointer index!")
        if index >= self._pointer_count:
            return 0, 0
        position = self._position + self._data_words * WORD + index * WORD
        return position, struct.unpack_from("<Q", self._segment, position)[0]

    def _target(self, position: int, word: int, kind: int) -> int:
        actual = word & 3
        if actual == _FAR:
            raise CapnpError("Far pointers are not supported!")
        if actual != kind:
            raise CapnpError("Unexpected pointer kind!")
        target = position + WORD + _decode_offset(word) * WORD
        if target < 0:
            raise CapnpError("Pointer points outside the segment!")
        return target

    def _check_range(self, start: int, length: int) -> None:
        if start < 0 or start + length > len(self._segment):
            raise CapnpError("Pointer points outside the segment!")

    def has_pointer(self, index: int) -> bool:
        """Whether the pointer at the given index is set."""
        return self._pointer(index)[1] != 0

    def get_text(self, index: int) -> str:
        """Read the text in the pointer at the given index; empty if unset."""
        position, word = self._pointer(index)
        if word == 0:
            return ""
        target = self._target(position, word, _LIST)
        if (word >> 32) & 7 != _BYTE_ELEMENTS:
            raise CapnpError("Text pointer is not a byte list!")
        count = word >> 35
        self._check_range(target, count)
        raw = self._segment[target : target + count]
        if not raw or raw[-1] != 0:
            raise CapnpError("Text is not NUL-terminated!")
        try:
            return bytes(raw[:-1]).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CapnpError("Text is not valid UTF-8!") from exc

    def get_struct(self, index: int) -> StructReader:
        """Read the struct in the pointer at the given index; all defaults if unset."""
        position, word = self._pointer(index)
        if word == 0:
            return StructReader(self._segment)
        target = self._target(position, word, _STRUCT)
        data_words = (word >> 32) & 0xFFFF
        pointer_count = word >> 48
        self._check_range(target, (data_words + pointer_count) * WORD)
        return StructReader(self._segment, target, data_words, pointer_count)

    def get_struct_list(self, index: int) -> list[StructReader]:
        """Read the list of structs in the pointer at the given index; empty if unset."""
        position, word = self._pointer(index)
        if word == 0:
            return []
        target = self._target(position, word, _LIST)
        if (word >> 32) & 7 != _COMPOSITE:
            raise CapnpError("List pointer is not a struct list!")
        total = word >> 35
        self._check_range(target, (1 + total) * WORD)
        tag = struct.unpack_from("<Q", self._segment, target)[0]
        if tag & 3 != _STRUCT:
            raise CapnpError("Invalid struct list tag!")
        count = (tag & 0xFFFFFFFF) >> 2
        data_words = (tag >> 32) & 0xFFFF
        pointer_count = tag >> 48
        element_words = data_words + pointer_count
        if count * element_words > total:
            raise CapnpError("Struct list is larger than its pointer says!")
        first = target + WORD
        return [
            StructReader(self._segment, first + i * element_words * WORD, data_words, pointer_count)
            for i in range(count)
        ]


def read_message(data: bytes) -> StructReader:
    """Parse a message in stream framing and return its root struct."""
    data = bytes(data)
    if len(data) < 4:
        raise CapnpError("Message is too short!")
    segment_count = struct.unpack_from("<I", data, 0)[0] + 1
    if segment_count > _MAX_SEGMENTS:
        raise CapnpError("Too many segments!")
    header = 4 + 4 * segment_count
    header += (-header) % WORD
    if len(data) < header:
        raise CapnpError("Message header is truncated!")
    sizes = struct.unpack_from(f"<{segment_count}I", data, 4)
    if header + sum(sizes) * WORD > len(data):
        raise CapnpError("Message segments are truncated!")
    if sizes[0] == 0:
        raise CapnpError("Message is empty!")
    first = data[header : header + sizes[0] * WORD]
    return StructReader(first, 0, 0, 1).get_struct(0)