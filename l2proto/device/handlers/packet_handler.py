from l2proto.core.logger import get_device_logger
from l2proto.protocol.common import PacketType
from l2proto.protocol.models import Packet

logger_device = get_device_logger()

_LABELS = {
    PacketType.USER_CMD: "UserCmd",
    PacketType.ACK_DATA: "AckData",
    PacketType.POINT_DATA: "PointData",
    PacketType.POINT_DATA_2D: "2DPointData",
    PacketType.IMU_DATA: "ImuData",
    PacketType.VERSION: "Version",
    PacketType.TIME_STAMP: "TimeStamp",
    PacketType.WORK_MODE_CONFIG: "WorkModeConfig",
    PacketType.IP_ADDRESS_CONFIG: "IpAddressConfig",
    PacketType.MAC_ADDRESS_CONFIG: "MacAddressConfig",
    PacketType.COMMAND: "Command",
    PacketType.PARAM_DATA: "ParamData",
    PacketType.WORK_MODE: "WorkMode",
}


def summarize(packet: Packet) -> str:
    """单行可读摘要，未解析类型只显示载荷长度"""
    label = _LABELS[packet.packet_type]
    if packet.is_opaque:
        return f"{label}({len(packet.data)})"
    return f"{label}({packet.data})"


def handle_packet(packet: Packet, skip_imu: bool = False) -> None:
    """记录解码后的数据包"""
    if skip_imu and packet.packet_type == PacketType.IMU_DATA:
        return
    logger_device.info(summarize(packet), packet_type=int(packet.packet_type))
