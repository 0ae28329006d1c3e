import unittest

from l2proto.core.exceptions import CrcMismatchError, MagicMismatchError, UnknownPacketTypeError
from l2proto.protocol import PacketParser, PacketType, iter_packets, parse
from l2proto.protocol.models import (
    Command,
    CommandType,
    LidarImuData,
    LidarPointData,
    UserCmd,
    UserCmdAck,
    Version,
    WorkMode,
)
from tests.frame_builder import (
    ack_bytes,
    build_frame,
    cmd_bytes,
    imu_bytes,
    point_data_bytes,
    version_bytes,
    work_mode_bytes,
)


class TestPacketParser(unittest.TestCase):
    def test_variant_matches_type_code(self):
        """每种类型码解析为对应的数据包"""
        cases = [
            (100, cmd_bytes(3, 0), UserCmd),
            (101, ack_bytes(100, 1, 0, 1), UserCmdAck),
            (102, point_data_bytes(), LidarPointData),
            (104, imu_bytes(), LidarImuData),
            (105, version_bytes(), Version),
            (107, work_mode_bytes(0), WorkMode),
            (2000, cmd_bytes(2, 0), Command),
            (2002, work_mode_bytes(0b11111), WorkMode),
        ]
        for code, payload, expected in cases:
            packet, remainder = parse(build_frame(code, payload) + b"tail")
            self.assertEqual(packet.packet_type, PacketType(code))
            self.assertIsInstance(packet.data, expected)
            self.assertFalse(packet.is_opaque)
            self.assertEqual(remainder, b"tail")

    def test_opaque_kinds(self):
        for code in (103, 106, 108, 109, 2001):
            payload = bytes(range(code % 50))
            packet, remainder = parse(build_frame(code, payload))
            self.assertEqual(packet.packet_type, PacketType(code))
            self.assertEqual(packet.data, payload)
            self.assertTrue(packet.is_opaque)
            self.assertEqual(remainder, b"")

    def test_unknown_packet_type(self):
        with self.assertRaises(UnknownPacketTypeError) as ctx:
            parse(build_frame(999, b""))
        self.assertEqual(ctx.exception.packet_type, 999)

    def test_two_frames_back_to_back(self):
        first = build_frame(2000, cmd_bytes(4, 0))
        second = build_frame(107, work_mode_bytes(0b10001))

        packet, remainder = parse(first + second)
        self.assertEqual(packet.data, Command(CommandType.VERSION_GET, 0))
        self.assertEqual(remainder, second)

        packet, remainder = parse(remainder)
        self.assertEqual(packet.packet_type, PacketType.WORK_MODE_CONFIG)
        self.assertTrue(packet.data.wide_angle)
        self.assertEqual(remainder, b"")

    def test_iter_packets(self):
        buffer = b"".join([
            build_frame(104, imu_bytes(seq=1)),
            build_frame(104, imu_bytes(seq=2)),
            build_frame(105, version_bytes()),
        ])
        packets = list(iter_packets(buffer))
        self.assertEqual([p.packet_type for p in packets],
                         [PacketType.IMU_DATA, PacketType.IMU_DATA, PacketType.VERSION])
        self.assertEqual([packets[0].data.info.seq, packets[1].data.info.seq], [1, 2])

    def test_iter_packets_stops_at_first_error(self):
        good = build_frame(2000, cmd_bytes(1, 0))
        bad = bytearray(build_frame(2000, cmd_bytes(1, 0)))
        bad[13] ^= 0xFF
        packets = iter_packets(good + bytes(bad) + good)
        self.assertEqual(next(packets).packet_type, PacketType.COMMAND)
        with self.assertRaises(CrcMismatchError):
            next(packets)

    def test_no_resync_on_garbage(self):
        """前导垃圾字节不会被跳过"""
        with self.assertRaises(MagicMismatchError):
            parse(b"\x00" + build_frame(2000, cmd_bytes(1, 0)))

    def test_iter_empty_buffer(self):
        self.assertEqual(list(iter_packets(b"")), [])


class TestWorkModeTypeOverride(unittest.TestCase):
    def test_overridden_code(self):
        parser = PacketParser(work_mode_packet_type=2005)
        packet, _ = parser.parse(build_frame(2005, work_mode_bytes(0b00100)))
        self.assertEqual(packet.packet_type, PacketType.WORK_MODE)
        self.assertTrue(packet.data.disable_imu)

    def test_default_code_no_longer_known(self):
        parser = PacketParser(work_mode_packet_type=2005)
        with self.assertRaises(UnknownPacketTypeError):
            parser.parse(build_frame(2002, work_mode_bytes(0)))

    def test_ack_uses_overridden_code(self):
        parser = PacketParser(work_mode_packet_type=2005)
        packet, _ = parser.parse(build_frame(101, ack_bytes(2005, 0, 0, 1)))
        self.assertEqual(packet.data.cmd_type, 0)

    def test_override_cannot_take_known_code(self):
        """覆盖值不能占用其他已知类型码，否则该类型会被当作工作模式解析"""
        for code in (100, 107, 2000):
            with self.assertRaises(ValueError):
                PacketParser(work_mode_packet_type=code)
        self.assertEqual(PacketParser(work_mode_packet_type=2002).work_mode_packet_type, 2002)


if __name__ == "__main__":
    unittest.main()
