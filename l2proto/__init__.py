"""
Unitree L2 雷达通信协议解码库

从串口或 UDP 载荷中解析数据帧，输出强类型的数据包
"""
from .protocol import PacketType, Packet, PacketParser, StreamDecoder, parse, iter_packets
from .core.exceptions import DecodeError

__all__ = ['PacketType', 'Packet', 'PacketParser', 'StreamDecoder', 'parse', 'iter_packets', 'DecodeError']

__version__ = "1.0.0"
