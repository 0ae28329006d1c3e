from pathlib import Path
from typing import Iterator, Optional, Union

from l2proto.core.logger import get_logger
from l2proto.protocol.models import Packet
from l2proto.protocol.parser import PacketParser

logger = get_logger(__name__)


def iter_capture_file(path: Union[str, Path], parser: Optional[PacketParser] = None) -> Iterator[Packet]:
    """解码原始字节转储文件（首尾相接的协议帧）"""
    data = Path(path).read_bytes()
    logger.info(f"Loaded {len(data)} bytes from {path}")
    return (parser or PacketParser()).iter_packets(data)
