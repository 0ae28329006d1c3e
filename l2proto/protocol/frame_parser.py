from typing import NamedTuple, Optional, Tuple

from l2proto.core.exceptions import (
    CrcMismatchError,
    LengthOverflowError,
    LengthUnderflowError,
    MagicMismatchError,
)
from l2proto.protocol.common import (
    FRAME_HEADER,
    FRAME_HEADER_LEN,
    FRAME_OVERHEAD,
    FRAME_TAIL,
    FRAME_TAIL_LEN,
    MAX_FRAME_SIZE,
)
from l2proto.protocol.reader import FieldReader, split_at
from l2proto.utils.protocol_utils import crc32_iso_hdlc


class FrameHeader(NamedTuple):
    """帧头: 0x55 0xAA 0x05 0x0A | packet_type | packet_size"""
    packet_type: int
    packet_size: int  # 整帧字节数 (帧头 + 载荷 + 帧尾)

    @classmethod
    def parse(cls, data: bytes) -> Tuple["FrameHeader", bytes]:
        chunk, remainder = split_at(data, FRAME_HEADER_LEN)
        if chunk[:4] != FRAME_HEADER:
            raise MagicMismatchError("header", chunk[:4])

        reader = FieldReader(chunk, "FrameHeader")
        reader.raw(4)
        packet_type = reader.u32()
        packet_size = reader.u32()
        reader.finish()
        return cls(packet_type, packet_size), remainder


class FrameTail(NamedTuple):
    """帧尾: crc32 | msg_type_check | reserve[2] | 0x00 0xFF"""
    crc32: int
    # 设备上报的帧恒为 0，主机下发帧含义未知
    msg_type_check: int
    reserve: bytes

    @classmethod
    def parse(cls, data: bytes) -> Tuple["FrameTail", bytes]:
        chunk, remainder = split_at(data, FRAME_TAIL_LEN)

        reader = FieldReader(chunk, "FrameTail")
        crc32 = reader.u32()
        msg_type_check = reader.u32()
        reserve = reader.raw(2)
        tail = reader.raw(2)
        reader.finish()

        if tail != FRAME_TAIL:
            raise MagicMismatchError("tail", tail)
        return cls(crc32, msg_type_check, reserve), remainder


def decode_frame(data: bytes) -> Tuple[FrameHeader, bytes, FrameTail, bytes]:
    """
    解析一个完整协议帧

    :param data: 以帧头开始的字节缓冲区
    :return: (帧头, 载荷, 帧尾, 剩余未消费字节)
    """
    header, remainder = FrameHeader.parse(data)

    payload_len = header.packet_size - FRAME_OVERHEAD
    if payload_len < 0:
        raise LengthUnderflowError(header.packet_size, FRAME_OVERHEAD)

    # 整帧必须全部到达后才进行后续处理
    payload, remainder = split_at(remainder, payload_len)

    # 协议文档写明 CRC 覆盖帧头和数据，实测只覆盖载荷
    computed = crc32_iso_hdlc(payload)

    tail, remainder = FrameTail.parse(remainder)
    if computed != tail.crc32:
        raise CrcMismatchError(expected=tail.crc32, computed=computed)

    return header, payload, tail, remainder


def frame_length(data: bytes, max_frame_size: Optional[int] = MAX_FRAME_SIZE) -> Optional[int]:
    """
    读取缓冲区开头帧声明的总长度，帧头未到齐时返回 None

    帧头魔数错误或长度越界时直接抛出，不等待整帧到达
    """
    if len(data) < FRAME_HEADER_LEN:
        return None
    header, _ = FrameHeader.parse(data)
    if header.packet_size < FRAME_OVERHEAD:
        raise LengthUnderflowError(header.packet_size, FRAME_OVERHEAD)
    if max_frame_size is not None and header.packet_size > max_frame_size:
        raise LengthOverflowError(header.packet_size, max_frame_size)
    return header.packet_size


def frame_complete(data: bytes, max_frame_size: Optional[int] = MAX_FRAME_SIZE) -> bool:
    """缓冲区开头的帧是否已全部到达"""
    size = frame_length(data, max_frame_size)
    return size is not None and len(data) >= size
