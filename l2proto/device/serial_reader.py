from typing import Iterator, List, Optional

import serial

from l2proto.config.settings import Settings
from l2proto.core.exceptions import DecodeError
from l2proto.core.logger import get_logger
from l2proto.protocol.models import Packet
from l2proto.protocol.parser import PacketParser, StreamDecoder

logger = get_logger(__name__)


class SerialPacketReader:
    """串口数据包读取器：读取字节块并交给 StreamDecoder 拼帧解码"""

    def __init__(self, port: str, baudrate: int, timeout: Optional[float] = 1.0,
                 read_size: int = 65536, parser: Optional[PacketParser] = None):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.read_size = read_size
        self.decoder = StreamDecoder(parser)
        self._serial: Optional[serial.Serial] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SerialPacketReader":
        return cls(
            port=settings.SERIAL_PORT,
            baudrate=settings.SERIAL_BAUD_RATE,
            timeout=settings.SERIAL_TIMEOUT,
            read_size=settings.SERIAL_READ_SIZE,
            parser=PacketParser(settings.WORK_MODE_PACKET_TYPE, settings.MAX_FRAME_SIZE),
        )

    def open(self) -> None:
        self._serial = serial.Serial(self.port, self.baudrate, timeout=self.timeout)
        logger.info(f"Opened serial port {self.port} @ {self.baudrate}")

    def close(self) -> None:
        if self._serial is not None:
            self._serial.close()
            self._serial = None
            logger.info(f"Closed serial port {self.port}")

    def __enter__(self) -> "SerialPacketReader":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _feed(self, chunk: bytes, discard_on_error: bool) -> List[Packet]:
        try:
            return self.decoder.feed(chunk)
        except DecodeError as e:
            if not discard_on_error:
                raise
            dropped = self.decoder.clear()
            logger.error(f"Discarded {dropped} bytes after decode error: {e}", **e.to_dict())
            return []

    def packets(self, stop_on_idle: bool = False, discard_on_error: bool = True) -> Iterator[Packet]:
        """
        持续读取并产出数据包

        :param stop_on_idle: 为 True 时一次读取超时无数据即视为设备断开
        :param discard_on_error: 为 True 时遇到错误帧丢弃已缓冲的数据后继续读取，否则抛出
        """
        if self._serial is None:
            raise RuntimeError("Serial port not opened")

        while True:
            chunk = self._serial.read(max(1, min(self._serial.in_waiting, self.read_size)))
            if not chunk:
                if stop_on_idle:
                    logger.warning(f"No data from {self.port}, LIDAR disconnected")
                    # 缓冲区开头若是被延后的错误帧，退出前报告
                    self._feed(b"", discard_on_error)
                    if self.decoder.pending:
                        logger.warning(f"Left {self.decoder.pending} bytes of a partial frame",
                                       pending=self.decoder.pending)
                    return
                continue

            for packet in self._feed(chunk, discard_on_error):
                yield packet
