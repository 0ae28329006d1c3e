from typing import Optional


class DecodeError(Exception):
    """所有协议解码异常的基类"""

    code = 1000

    def __init__(self, message: str = "Decode failed", detail: Optional[dict] = None):
        """
        初始化异常

        :param message: 错误信息
        :param detail: 详细错误数据字典（默认空字典）
        """
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def __str__(self):
        return f"{type(self).__name__}(code={self.code}, message='{self.message}', detail={self.detail})"

    def to_dict(self) -> dict:
        """将异常转换为字典格式，便于日志输出"""
        return {
            "code": self.code,
            "message": self.message,
            "detail": self.detail
        }


class InsufficientDataError(DecodeError):
    """缓冲区字节数不足"""
    code = 1001

    def __init__(self, needed: int, available: int):
        super().__init__(
            f"expected a minimum of {needed} bytes but got {available}",
            {"needed": needed, "available": available}
        )
        self.needed = needed
        self.available = available


class MagicMismatchError(DecodeError):
    """帧头/帧尾魔数不匹配"""
    code = 1002

    def __init__(self, which: str, actual: bytes):
        super().__init__(
            f"wrong {which} magic bytes: {actual.hex(' ')}",
            {"which": which, "actual": actual.hex()}
        )
        self.which = which
        self.actual = actual


class LengthUnderflowError(DecodeError):
    """声明的包长度不足以容纳帧头和帧尾"""
    code = 1003

    def __init__(self, packet_size: int, minimum: int):
        super().__init__(
            f"packet size {packet_size} is too small to hold any payload (minimum {minimum})",
            {"packet_size": packet_size, "minimum": minimum}
        )
        self.packet_size = packet_size
        self.minimum = minimum


class CrcMismatchError(DecodeError):
    """CRC 校验失败"""
    code = 1004

    def __init__(self, expected: int, computed: int):
        super().__init__(
            f"CRC mismatch: frame says 0x{expected:08X}, computed 0x{computed:08X}",
            {"expected": expected, "computed": computed}
        )
        self.expected = expected
        self.computed = computed


class UnknownPacketTypeError(DecodeError):
    """未知的包类型"""
    code = 1005

    def __init__(self, packet_type: int, context: str = "frame"):
        super().__init__(
            f"unknown packet type in {context}: {packet_type}",
            {"packet_type": packet_type, "context": context}
        )
        self.packet_type = packet_type
        self.context = context


class UnknownSubCommandError(DecodeError):
    """未知的命令类型"""
    code = 1006

    def __init__(self, type_code: int, context: str):
        super().__init__(
            f"unknown {context} type: {type_code}",
            {"type_code": type_code, "context": context}
        )
        self.type_code = type_code
        self.context = context


class InvalidEnumValueError(DecodeError):
    """字段值不在枚举范围内"""
    code = 1007

    def __init__(self, field: str, value: int):
        super().__init__(
            f"invalid value for {field}: {value}",
            {"field": field, "value": value}
        )
        self.field = field
        self.value = value


class InvalidUtf8Error(DecodeError):
    """字符串字段不是合法的 UTF-8"""
    code = 1008

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"{field} contained invalid utf-8: {reason}",
            {"field": field, "reason": reason}
        )
        self.field = field
        self.reason = reason


class LengthOverflowError(DecodeError):
    """声明的包长度超过允许的最大帧长"""
    code = 1009

    def __init__(self, packet_size: int, maximum: int):
        super().__init__(
            f"packet size {packet_size} exceeds the maximum frame size {maximum}",
            {"packet_size": packet_size, "maximum": maximum}
        )
        self.packet_size = packet_size
        self.maximum = maximum


class RecordLayoutError(RuntimeError):
    """记录布局与声明长度不一致（程序错误，不属于输入错误）"""
