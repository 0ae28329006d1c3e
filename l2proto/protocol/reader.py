import struct
from typing import Tuple

from l2proto.core.exceptions import InsufficientDataError, RecordLayoutError


def split_at(data: bytes, length: int) -> Tuple[bytes, bytes]:
    """切出前 length 个字节，返回 (数据段, 剩余字节)"""
    if len(data) < length:
        raise InsufficientDataError(needed=length, available=len(data))
    return data[:length], data[length:]


class FieldReader:
    """
    定长字段读取器

    按声明顺序依次读取小端整型/浮点字段，读完后调用 finish() 确认
    记录的字节数与字段宽度之和完全一致。
    """

    _U8 = struct.Struct("<B")
    _U16 = struct.Struct("<H")
    _U32 = struct.Struct("<I")
    _F32 = struct.Struct("<f")

    def __init__(self, data: bytes, record: str = "record"):
        self._data = memoryview(data)
        self._pos = 0
        self.record = record

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _unpack(self, fmt: struct.Struct):
        if self.remaining < fmt.size:
            raise RecordLayoutError(
                f"{self.record}: field at offset {self._pos} needs {fmt.size} bytes, "
                f"only {self.remaining} left"
            )
        value = fmt.unpack_from(self._data, self._pos)[0]
        self._pos += fmt.size
        return value

    def u8(self) -> int:
        return self._unpack(self._U8)

    def u16(self) -> int:
        return self._unpack(self._U16)

    def u32(self) -> int:
        return self._unpack(self._U32)

    def f32(self) -> float:
        return self._unpack(self._F32)

    def array(self, fmt: str, count: int) -> tuple:
        """读取 count 个同类型字段，fmt 为 struct 单字段格式 (如 'H', 'f')"""
        layout = struct.Struct(f"<{count}{fmt}")
        if self.remaining < layout.size:
            raise RecordLayoutError(
                f"{self.record}: array at offset {self._pos} needs {layout.size} bytes, "
                f"only {self.remaining} left"
            )
        values = layout.unpack_from(self._data, self._pos)
        self._pos += layout.size
        return values

    def raw(self, length: int) -> bytes:
        """读取原始字节段"""
        if self.remaining < length:
            raise RecordLayoutError(
                f"{self.record}: {length} raw bytes at offset {self._pos}, only {self.remaining} left"
            )
        chunk = bytes(self._data[self._pos:self._pos + length])
        self._pos += length
        return chunk

    def finish(self) -> None:
        """所有字段读取完毕后调用，多余字节视为布局定义错误"""
        if self.remaining != 0:
            raise RecordLayoutError(
                f"{self.record}: {self.remaining} bytes left unconsumed after reading all fields"
            )
