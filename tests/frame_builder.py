import binascii
import struct

FRAME_HEADER = b"\x55\xAA\x05\x0A"
FRAME_TAIL = b"\x00\xFF"


class FrameBuilder:
    """测试用协议帧构造器"""

    def __init__(self, packet_type: int):
        self.packet_type = packet_type
        self._payload = b''
        self.msg_type_check = 0
        self.crc_override = None

    def set_payload(self, payload: bytes) -> "FrameBuilder":
        self._payload = payload
        return self

    def build(self) -> bytes:
        """构建完整协议帧"""
        frame = FRAME_HEADER + struct.pack("<II", self.packet_type, len(self._payload) + 24)
        frame += self._payload
        crc = binascii.crc32(self._payload) & 0xFFFFFFFF
        if self.crc_override is not None:
            crc = self.crc_override
        frame += struct.pack("<II", crc, self.msg_type_check)
        frame += b"\x00\x00" + FRAME_TAIL
        return frame


def build_frame(packet_type: int, payload: bytes) -> bytes:
    return FrameBuilder(packet_type).set_payload(payload).build()


# ---------- 载荷构造 ----------
def data_info_bytes(seq=1, payload_size=0, sec=0, nsec=0) -> bytes:
    return struct.pack("<IIII", seq, payload_size, sec, nsec)


def cmd_bytes(cmd_type: int, cmd_value: int) -> bytes:
    return struct.pack("<II", cmd_type, cmd_value)


def ack_bytes(packet_type: int, cmd_type: int, cmd_value: int, status: int) -> bytes:
    return struct.pack("<IIII", packet_type, cmd_type, cmd_value, status)


def work_mode_bytes(flags: int) -> bytes:
    return struct.pack("<I", flags)


def version_bytes(hw=(1, 0, 0, 2), sw=(2, 3, 4, 5), name=b"L2", date=b"250314") -> bytes:
    return (bytes(hw) + bytes(sw) + name.ljust(24, b"\x00")
            + date.ljust(8, b"\x00") + b"\x00" * 40)


def imu_bytes(seq=7) -> bytes:
    return (data_info_bytes(seq, 40, 100, 5)
            + struct.pack("<4f", 1.0, 0.0, 0.0, 0.0)
            + struct.pack("<3f", 0.5, -0.5, 0.25)
            + struct.pack("<3f", 0.0, 0.0, 9.75))


def point_data_bytes(seq=3, point_num=3) -> bytes:
    ranges = [0] * 300
    intensities = [0] * 300
    for i in range(point_num):
        ranges[i] = 1000 + i
        intensities[i] = (10 + i) & 0xFF
    return (data_info_bytes(seq, 1020, 12, 34)
            + struct.pack("<II7f", 600, 1200, 0.5, 0.0, 0.0, 40.0, 12.0, 1.5, 25.0)
            + struct.pack("<8f", 0.01, 0.02, 0.0, 0.0, 0.5, 0.25, 1.0, 1.0)
            + struct.pack("<8f", 0.0, 0.125, 0.1, 0.05, 30.0, -0.5, 0.01, 0.0001)
            + struct.pack("<I", point_num)
            + struct.pack("<300H", *ranges)
            + struct.pack("<300B", *intensities))
