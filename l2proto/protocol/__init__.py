"""
L2 雷达协议解析核心包

主要功能：
- parse() 解析缓冲区开头的一个数据包，返回 (数据包, 剩余字节)
- iter_packets() / StreamDecoder 处理首尾相接或分段到达的数据
- decode_frame() 校验帧头、帧尾与 CRC
"""
from .common import (
    FRAME_HEADER,
    FRAME_TAIL,
    FRAME_HEADER_LEN,
    FRAME_TAIL_LEN,
    MAX_FRAME_SIZE,
    PacketType
)
from .frame_parser import FrameHeader, FrameTail, decode_frame
from .models import (
    Ack, AckStatus, Command, CommandAck, CommandType, DataInfo, LidarCalibParam,
    LidarImuData, LidarInsideState, LidarPointData, Packet, StandbyType, TimeStamp,
    UserCmd, UserCmdAck, UserCmdType, Version, WorkMode, WorkModeAck
)
from .parser import PacketParser, StreamDecoder, iter_packets, parse

__all__ = [
    'FRAME_HEADER', 'FRAME_TAIL', 'FRAME_HEADER_LEN', 'FRAME_TAIL_LEN', 'MAX_FRAME_SIZE',
    'PacketType',
    'FrameHeader', 'FrameTail', 'decode_frame',
    'Ack', 'AckStatus', 'Command', 'CommandAck', 'CommandType', 'DataInfo',
    'LidarCalibParam', 'LidarImuData', 'LidarInsideState', 'LidarPointData', 'Packet',
    'StandbyType', 'TimeStamp', 'UserCmd', 'UserCmdAck', 'UserCmdType', 'Version',
    'WorkMode', 'WorkModeAck',
    'PacketParser', 'StreamDecoder', 'iter_packets', 'parse'
]
