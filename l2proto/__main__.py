import argparse
import sys

from l2proto.config.settings import get_settings
from l2proto.core.exceptions import DecodeError
from l2proto.core.logger import get_logger, setup_logging
from l2proto.device.capture import iter_capture_file
from l2proto.device.handlers.packet_handler import handle_packet
from l2proto.device.serial_reader import SerialPacketReader
from l2proto.device.udp_receiver import UdpPacketReceiver
from l2proto.protocol.parser import PacketParser

logger = get_logger("l2proto.cli")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="l2proto", description="Unitree L2 LIDAR packet decoder")
    parser.add_argument("--skip-imu", action="store_true", help="Do not log IMU packets")
    sub = parser.add_subparsers(dest="source", required=True)

    serial_cmd = sub.add_parser("serial", help="Decode packets from a serial port")
    serial_cmd.add_argument("-p", "--port", default=None, help="Serial port name")
    serial_cmd.add_argument("-b", "--baud", type=int, default=None, help="Baud rate")

    udp_cmd = sub.add_parser("udp", help="Decode UDP packets sent by the LIDAR")
    udp_cmd.add_argument("--local-ip", default=None)
    udp_cmd.add_argument("--local-port", type=int, default=None)
    udp_cmd.add_argument("--timeout", type=float, default=None,
                         help="Stop after this many seconds without a datagram")

    file_cmd = sub.add_parser("file", help="Decode a raw dump of concatenated frames")
    file_cmd.add_argument("path")
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    settings = get_settings()
    if settings.DEBUG:
        settings.LOG_LEVEL = "DEBUG"
    setup_logging(settings)

    try:
        if args.source == "serial":
            if args.port:
                settings.SERIAL_PORT = args.port
            if args.baud:
                settings.SERIAL_BAUD_RATE = args.baud
            with SerialPacketReader.from_settings(settings) as reader:
                for packet in reader.packets(stop_on_idle=True):
                    handle_packet(packet, args.skip_imu)
        elif args.source == "udp":
            if args.local_ip:
                settings.LOCAL_IP = args.local_ip
            if args.local_port:
                settings.LOCAL_PORT = args.local_port
            with UdpPacketReceiver.from_settings(settings, timeout=args.timeout) as receiver:
                for packet in receiver.packets():
                    handle_packet(packet, args.skip_imu)
        else:
            parser = PacketParser(settings.WORK_MODE_PACKET_TYPE, settings.MAX_FRAME_SIZE)
            for packet in iter_capture_file(args.path, parser):
                handle_packet(packet, args.skip_imu)
    except DecodeError as e:
        logger.error(f"Decode failed: {e}", **e.to_dict())
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
