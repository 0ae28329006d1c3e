"""
载荷解码器

每个函数把一个包类型的载荷转换为对应的模型，定长记录只读取
声明长度的字节，多余的载荷字节忽略。
"""
from l2proto.core.exceptions import (
    InvalidEnumValueError,
    InvalidUtf8Error,
    UnknownPacketTypeError,
    UnknownSubCommandError,
)
from l2proto.protocol.common import PacketType
from l2proto.protocol.models import (
    Ack,
    AckStatus,
    Command,
    CommandAck,
    CommandType,
    LidarAckData,
    LidarCmdRecord,
    LidarImuData,
    LidarPointData,
    LidarVersionData,
    LidarWorkModeConfig,
    StandbyType,
    UserCmd,
    UserCmdAck,
    UserCmdType,
    Version,
    WorkMode,
    WorkModeAck,
)

WORK_MODE_RESERVED_MASK = 0xFFFFFFE0


# ---------- 二级分发: (类型码, 数值) -> 命令 ----------
def command_from_code(type_code: int, value: int) -> Command:
    try:
        cmd_type = CommandType(type_code)
    except ValueError:
        raise UnknownSubCommandError(type_code, "command") from None
    return Command(cmd_type, value)


def user_cmd_from_code(type_code: int, value: int) -> UserCmd:
    try:
        cmd_type = UserCmdType(type_code)
    except ValueError:
        raise UnknownSubCommandError(type_code, "user command") from None

    if cmd_type == UserCmdType.STANDBY_TYPE:
        try:
            return UserCmd(cmd_type, StandbyType(value))
        except ValueError:
            raise InvalidEnumValueError("standby mode", value) from None
    return UserCmd(cmd_type, value)


def ack_status_from_code(value: int) -> AckStatus:
    try:
        return AckStatus(value)
    except ValueError:
        raise InvalidEnumValueError("ack status", value) from None


# ---------- 载荷解码 ----------
def decode_user_cmd(payload: bytes) -> UserCmd:
    record, _ = LidarCmdRecord.parse(payload)
    return user_cmd_from_code(record.cmd_type, record.cmd_value)


def decode_command(payload: bytes) -> Command:
    record, _ = LidarCmdRecord.parse(payload)
    return command_from_code(record.cmd_type, record.cmd_value)


def decode_ack(payload: bytes, work_mode_packet_type: int = PacketType.WORK_MODE) -> Ack:
    """应答按被应答的包类型分发"""
    record, _ = LidarAckData.parse(payload)
    status = ack_status_from_code(record.status)

    if record.packet_type == PacketType.USER_CMD:
        return UserCmdAck(user_cmd_from_code(record.cmd_type, record.cmd_value), status)
    elif record.packet_type == PacketType.COMMAND:
        return CommandAck(command_from_code(record.cmd_type, record.cmd_value), status)
    elif record.packet_type == work_mode_packet_type:
        return WorkModeAck(record.cmd_type, record.cmd_value, status)
    raise UnknownPacketTypeError(record.packet_type, "ack")


def decode_point_data(payload: bytes) -> LidarPointData:
    data, _ = LidarPointData.parse(payload)
    return data


def decode_imu_data(payload: bytes) -> LidarImuData:
    data, _ = LidarImuData.parse(payload)
    return data


def decode_version(payload: bytes) -> Version:
    record, _ = LidarVersionData.parse(payload)

    # 名称从尾部去掉填充的 NUL
    try:
        name = record.name.rstrip(b"\x00").decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error("device name", str(e)) from None

    # 编译日期为 6 个 ASCII 数字 YYMMDD
    digits = "".join(chr(byte) for byte in record.date[:6])
    date = f"20{digits[0:2]}-{digits[2:4]}-{digits[4:6]}"

    return Version(
        hardware=tuple(record.hw_version),
        software=tuple(record.sw_version),
        name=name,
        date=date,
    )


def work_mode_from_flags(flags: int) -> WorkMode:
    """解析工作模式位域，bit 5-31 为保留位必须为 0"""
    if flags & WORK_MODE_RESERVED_MASK:
        raise InvalidEnumValueError("work mode flags", flags)

    return WorkMode(
        wide_angle=bool(flags & 0b00001),
        measure_2d=bool(flags & 0b00010),
        disable_imu=bool(flags & 0b00100),
        serial_mode=bool(flags & 0b01000),
        wait_start=bool(flags & 0b10000),
    )


def decode_work_mode(payload: bytes) -> WorkMode:
    record, _ = LidarWorkModeConfig.parse(payload)
    return work_mode_from_flags(record.mode)


def decode_opaque(payload: bytes) -> bytes:
    """未经验证的包类型，原样返回载荷"""
    return bytes(payload)
