from typing import Iterator, List, Optional, Tuple

from l2proto.core.exceptions import DecodeError, UnknownPacketTypeError
from l2proto.core.logger import get_logger
from l2proto.protocol import decoders
from l2proto.protocol.common import FRAME_HEADER_LEN, MAX_FRAME_SIZE, OPAQUE_PACKET_TYPES, PacketType
from l2proto.protocol.frame_parser import decode_frame, frame_length
from l2proto.protocol.models import Packet

logger = get_logger(__name__)


class PacketParser:
    """协议包解析器（无状态）"""

    def __init__(self, work_mode_packet_type: int = PacketType.WORK_MODE,
                 max_frame_size: Optional[int] = MAX_FRAME_SIZE):
        # WORK_MODE 类型码为推测值，允许覆盖，但不能占用其他已知类型
        work_mode_packet_type = int(work_mode_packet_type)
        known = {int(t) for t in PacketType if t != PacketType.WORK_MODE}
        if work_mode_packet_type in known:
            raise ValueError(
                f"work mode packet type {work_mode_packet_type} collides with "
                f"{PacketType(work_mode_packet_type).name}"
            )
        self.work_mode_packet_type = work_mode_packet_type
        self.max_frame_size = max_frame_size

    def _packet_type(self, code: int) -> PacketType:
        if code == self.work_mode_packet_type:
            return PacketType.WORK_MODE
        try:
            packet_type = PacketType(code)
        except ValueError:
            raise UnknownPacketTypeError(code) from None
        if packet_type == PacketType.WORK_MODE:
            # 默认类型码已被覆盖
            raise UnknownPacketTypeError(code)
        return packet_type

    def _decode_payload(self, packet_type: PacketType, payload: bytes):
        if packet_type in OPAQUE_PACKET_TYPES:
            return decoders.decode_opaque(payload)
        elif packet_type == PacketType.USER_CMD:
            return decoders.decode_user_cmd(payload)
        elif packet_type == PacketType.ACK_DATA:
            return decoders.decode_ack(payload, self.work_mode_packet_type)
        elif packet_type == PacketType.POINT_DATA:
            return decoders.decode_point_data(payload)
        elif packet_type == PacketType.IMU_DATA:
            return decoders.decode_imu_data(payload)
        elif packet_type == PacketType.VERSION:
            return decoders.decode_version(payload)
        elif packet_type == PacketType.WORK_MODE_CONFIG:
            return decoders.decode_work_mode(payload)
        elif packet_type == PacketType.COMMAND:
            return decoders.decode_command(payload)
        # PacketType.WORK_MODE
        return decoders.decode_work_mode(payload)

    def parse(self, data: bytes) -> Tuple[Packet, bytes]:
        """
        解析缓冲区开头的一个数据包

        :param data: 以帧头开始的字节缓冲区
        :return: (数据包, 剩余未消费字节)
        """
        header, payload, _, remainder = decode_frame(data)
        packet_type = self._packet_type(header.packet_type)
        packet = Packet(packet_type, self._decode_payload(packet_type, payload))
        logger.debug("Decoded packet", packet_type=packet_type.name, payload_len=len(payload))
        return packet, remainder

    def iter_packets(self, data: bytes) -> Iterator[Packet]:
        """依次解析首尾相接的多个数据包，遇到错误立即抛出"""
        remainder = bytes(data)
        while remainder:
            packet, remainder = self.parse(remainder)
            yield packet


_default_parser = PacketParser()


def parse(data: bytes) -> Tuple[Packet, bytes]:
    return _default_parser.parse(data)


def iter_packets(data: bytes) -> Iterator[Packet]:
    return _default_parser.iter_packets(data)


class StreamDecoder:
    """
    流式解码器

    传输层每次读取到的数据块通过 feed() 追加，返回所有完整的数据包；
    末尾不完整的帧保留在缓冲区，等待下一次 feed()。帧头声明的长度超过
    parser.max_frame_size 时立即报错，不再等待。遇到错误帧时不做
    重新同步：错误帧之前的数据包正常返回，错误帧留在缓冲区开头，
    下一次 feed() 抛出该错误，由调用方决定是否 clear() 丢弃缓冲区。
    """

    def __init__(self, parser: Optional[PacketParser] = None):
        self.parser = parser or _default_parser
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """缓冲区中尚未解析的字节数"""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> List[Packet]:
        self._buffer.extend(chunk)
        packets = []
        while self._buffer:
            try:
                # 只复制帧头和完整帧，未到齐的数据留在缓冲区
                size = frame_length(bytes(self._buffer[:FRAME_HEADER_LEN]), self.parser.max_frame_size)
                if size is None or len(self._buffer) < size:
                    break
                packet, _ = self.parser.parse(bytes(self._buffer[:size]))
            except DecodeError as e:
                if packets:
                    logger.debug(f"Deferred decode error after {len(packets)} packets: {e}",
                                 pending=len(self._buffer))
                    return packets
                raise
            del self._buffer[:size]
            packets.append(packet)
        return packets

    def clear(self) -> int:
        """丢弃缓冲区，返回丢弃的字节数"""
        dropped = len(self._buffer)
        self._buffer.clear()
        return dropped
