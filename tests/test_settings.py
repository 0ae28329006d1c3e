import os
import unittest
from unittest import mock

from l2proto.config.settings import Settings


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.ENV, "dev")
        self.assertEqual(settings.SERIAL_BAUD_RATE, 4_000_000)
        self.assertEqual((settings.LIDAR_IP, settings.LIDAR_PORT), ("192.168.1.62", 6101))
        self.assertEqual((settings.LOCAL_IP, settings.LOCAL_PORT), ("192.168.1.2", 6201))
        self.assertEqual(settings.WORK_MODE_PACKET_TYPE, 2002)
        self.assertEqual(settings.MAX_FRAME_SIZE, 64 * 1024)

    def test_env_override(self):
        env = {"ENV": "prod", "WORK_MODE_PACKET_TYPE": "2010", "SERIAL_PORT": "/dev/ttyUSB1"}
        with mock.patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.ENV, "prod")
        self.assertEqual(settings.WORK_MODE_PACKET_TYPE, 2010)
        self.assertEqual(settings.SERIAL_PORT, "/dev/ttyUSB1")

    def test_invalid_packet_type_rejected(self):
        with mock.patch.dict(os.environ, {"WORK_MODE_PACKET_TYPE": "-1"}, clear=True):
            with self.assertRaises(ValueError):
                Settings(_env_file=None)


if __name__ == '__main__':
    unittest.main()
