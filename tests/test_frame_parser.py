import struct
import unittest

from l2proto.core.exceptions import (
    CrcMismatchError,
    InsufficientDataError,
    LengthOverflowError,
    LengthUnderflowError,
    MagicMismatchError,
)
from l2proto.protocol.frame_parser import (
    FrameHeader,
    FrameTail,
    decode_frame,
    frame_complete,
    frame_length,
)
from tests.frame_builder import FrameBuilder, build_frame, cmd_bytes


class TestFrameParser(unittest.TestCase):
    def setUp(self):
        self.payload = cmd_bytes(4, 0)
        self.frame = build_frame(2000, self.payload)

    def test_frame_integrity(self):
        """测试完整帧解析流程"""
        header, payload, tail, remainder = decode_frame(self.frame + b"\x55\xAA")
        self.assertEqual(header, FrameHeader(packet_type=2000, packet_size=32))
        self.assertEqual(payload, self.payload)
        self.assertEqual(tail.msg_type_check, 0)
        self.assertEqual(tail.reserve, b"\x00\x00")
        self.assertEqual(remainder, b"\x55\xAA")

    def test_header_magic_each_byte(self):
        """帧头任意魔数字节被篡改都应报错"""
        for index in range(4):
            corrupted = bytearray(self.frame)
            corrupted[index] ^= 0xFF
            with self.assertRaises(MagicMismatchError) as ctx:
                decode_frame(bytes(corrupted))
            self.assertEqual(ctx.exception.which, "header")

    def test_tail_magic(self):
        for index in (len(self.frame) - 2, len(self.frame) - 1):
            corrupted = bytearray(self.frame)
            corrupted[index] ^= 0x5A
            with self.assertRaises(MagicMismatchError) as ctx:
                decode_frame(bytes(corrupted))
            self.assertEqual(ctx.exception.which, "tail")

    def test_crc_error_detection(self):
        """篡改载荷，CRC 不变"""
        for index in range(12, 12 + len(self.payload)):
            corrupted = bytearray(self.frame)
            corrupted[index] ^= 0x01
            with self.assertRaises(CrcMismatchError):
                decode_frame(bytes(corrupted))

    def test_crc_field_corrupted(self):
        builder = FrameBuilder(2000).set_payload(self.payload)
        good_crc = FrameTail.parse(self.frame[-12:])[0].crc32
        builder.crc_override = good_crc ^ 0x80000000
        with self.assertRaises(CrcMismatchError) as ctx:
            decode_frame(builder.build())
        self.assertEqual(ctx.exception.expected, good_crc ^ 0x80000000)
        self.assertEqual(ctx.exception.computed, good_crc)

    def test_crc_covers_payload_only(self):
        """CRC 只覆盖载荷，帧头变化不影响校验"""
        frame = bytearray(self.frame)
        frame[4:8] = struct.pack("<I", 999)
        header, _, _, _ = decode_frame(bytes(frame))
        self.assertEqual(header.packet_type, 999)

    def test_length_underflow(self):
        frame = bytearray(self.frame)
        frame[8:12] = struct.pack("<I", 23)
        with self.assertRaises(LengthUnderflowError):
            decode_frame(bytes(frame))

    def test_truncated_payload(self):
        with self.assertRaises(InsufficientDataError):
            decode_frame(self.frame[:16])

    def test_truncated_tail(self):
        with self.assertRaises(InsufficientDataError):
            decode_frame(self.frame[:-1])

    def test_short_header(self):
        with self.assertRaises(InsufficientDataError) as ctx:
            decode_frame(self.frame[:7])
        self.assertEqual(ctx.exception.needed, 12)

    def test_empty_payload(self):
        header, payload, _, remainder = decode_frame(build_frame(106, b""))
        self.assertEqual(header.packet_size, 24)
        self.assertEqual(payload, b"")
        self.assertEqual(remainder, b"")

    def test_frame_complete(self):
        self.assertFalse(frame_complete(self.frame[:11]))
        self.assertFalse(frame_complete(self.frame[:-1]))
        self.assertTrue(frame_complete(self.frame))
        with self.assertRaises(MagicMismatchError):
            frame_complete(b"\x00" * 12)

    def test_frame_length(self):
        self.assertIsNone(frame_length(self.frame[:11]))
        self.assertEqual(frame_length(self.frame[:12]), 32)

    def test_frame_length_rejects_oversized_header(self):
        """帧头声明的长度超过上限时立即报错，不等待数据"""
        header = bytearray(self.frame[:12])
        header[8:12] = struct.pack("<I", 0xFFFFFFFF)
        with self.assertRaises(LengthOverflowError) as ctx:
            frame_length(bytes(header))
        self.assertEqual(ctx.exception.code, 1009)
        self.assertEqual(ctx.exception.packet_size, 0xFFFFFFFF)
        with self.assertRaises(LengthOverflowError):
            frame_complete(self.frame, max_frame_size=31)
        self.assertTrue(frame_complete(self.frame, max_frame_size=32))
        self.assertEqual(frame_length(bytes(header), max_frame_size=None), 0xFFFFFFFF)

    def test_frame_length_underflow(self):
        header = bytearray(self.frame[:12])
        header[8:12] = struct.pack("<I", 23)
        with self.assertRaises(LengthUnderflowError):
            frame_length(bytes(header))


if __name__ == "__main__":
    unittest.main()
