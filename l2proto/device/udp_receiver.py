import socket
from typing import Iterator, Optional, Tuple

from l2proto.config.settings import Settings
from l2proto.core.exceptions import DecodeError
from l2proto.core.logger import get_logger
from l2proto.protocol.models import Packet
from l2proto.protocol.parser import PacketParser

logger = get_logger(__name__)


class UdpPacketReceiver:
    """UDP 数据包接收器，只接受来自雷达地址的数据报"""

    def __init__(self, local_addr: Tuple[str, int], lidar_addr: Tuple[str, int],
                 max_size: int = 65535, timeout: Optional[float] = None,
                 parser: Optional[PacketParser] = None):
        self.local_addr = local_addr
        self.lidar_addr = lidar_addr
        self.max_size = max_size
        self.timeout = timeout
        self.parser = parser or PacketParser()
        self._sock: Optional[socket.socket] = None

    @classmethod
    def from_settings(cls, settings: Settings, timeout: Optional[float] = None) -> "UdpPacketReceiver":
        return cls(
            local_addr=(settings.LOCAL_IP, settings.LOCAL_PORT),
            lidar_addr=(settings.LIDAR_IP, settings.LIDAR_PORT),
            max_size=settings.UDP_MAX_SIZE,
            timeout=timeout,
            parser=PacketParser(settings.WORK_MODE_PACKET_TYPE, settings.MAX_FRAME_SIZE),
        )

    def open(self) -> None:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind(self.local_addr)
        except OSError:
            sock.close()
            raise
        sock.settimeout(self.timeout)
        self._sock = sock
        logger.info(f"Listening on {self.local_addr[0]}:{self.local_addr[1]}, "
                    f"expecting packets from {self.lidar_addr[0]}:{self.lidar_addr[1]}")

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> "UdpPacketReceiver":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def decode_datagram(self, data: bytes) -> Iterator[Packet]:
        """解码一个数据报中首尾相接的全部数据包"""
        return self.parser.iter_packets(data)

    def packets(self) -> Iterator[Packet]:
        """持续接收数据报并产出数据包，单个数据报解码失败时记录并丢弃"""
        if self._sock is None:
            raise RuntimeError("UDP socket not opened")

        while True:
            try:
                data, addr = self._sock.recvfrom(self.max_size)
            except socket.timeout:
                logger.warning(f"No datagram within {self.timeout}s")
                return

            if addr != self.lidar_addr:
                logger.debug(f"Ignored {len(data)} bytes from {addr[0]}:{addr[1]}")
                continue

            try:
                for packet in self.decode_datagram(data):
                    yield packet
            except DecodeError as e:
                logger.error(f"Failed to decode datagram: {e}", **e.to_dict())
