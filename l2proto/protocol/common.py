# 协议常量
from enum import IntEnum

FRAME_HEADER = b"\x55\xAA\x05\x0A"
FRAME_TAIL = b"\x00\xFF"

FRAME_HEADER_LEN = 12  # magic(4) + packet_type(4) + packet_size(4)
FRAME_TAIL_LEN = 12  # crc32(4) + msg_type_check(4) + reserve(2) + tail(2)
FRAME_OVERHEAD = FRAME_HEADER_LEN + FRAME_TAIL_LEN

POINT_DATA_MAX_POINTS = 300

# 流式拼帧时允许的最大帧长，最大的点云帧为 1044 字节
MAX_FRAME_SIZE = 64 * 1024


# 协议类型定义
class PacketType(IntEnum):
    USER_CMD = 100
    ACK_DATA = 101
    POINT_DATA = 102
    POINT_DATA_2D = 103
    IMU_DATA = 104
    VERSION = 105
    TIME_STAMP = 106
    WORK_MODE_CONFIG = 107
    IP_ADDRESS_CONFIG = 108
    MAC_ADDRESS_CONFIG = 109

    COMMAND = 2000
    PARAM_DATA = 2001
    # 设备文档中未给出，根据抓包推测
    WORK_MODE = 2002


# 未经真实设备数据验证的类型，载荷按原始字节透传
OPAQUE_PACKET_TYPES = frozenset({
    PacketType.POINT_DATA_2D,
    PacketType.TIME_STAMP,
    PacketType.IP_ADDRESS_CONFIG,
    PacketType.MAC_ADDRESS_CONFIG,
    PacketType.PARAM_DATA,
})
