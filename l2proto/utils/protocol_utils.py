import binascii


def crc32_iso_hdlc(data) -> int:
    """CRC32/ISO-HDLC (以太网/PNG 多项式) 校验实现"""
    return binascii.crc32(data) & 0xFFFFFFFF
