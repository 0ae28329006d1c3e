from enum import IntEnum
from typing import Any, Iterator, NamedTuple, Tuple, Union

from l2proto.protocol.common import POINT_DATA_MAX_POINTS, PacketType
from l2proto.protocol.reader import FieldReader, split_at


# ---------- 命令/应答枚举 ----------
class AckStatus(IntEnum):
    SUCCESS = 1
    CRC_ERROR = 2
    HEADER_ERROR = 3
    BLOCK_ERROR = 4
    WAIT_ERROR = 5  # 数据未就绪


class CommandType(IntEnum):
    """LIDAR_COMMAND (2000) 命令类型"""
    RESET_TYPE = 1
    PARAM_SAVE = 2
    PARAM_GET = 3
    VERSION_GET = 4
    STANDBY_TYPE = 5
    LATENCY_TYPE = 6
    CONFIG_RESET = 7


class UserCmdType(IntEnum):
    """LIDAR_USER_CMD (100) 命令类型，编号与 CommandType 不同"""
    RESET_TYPE = 1
    STANDBY_TYPE = 2
    VERSION_GET = 3
    LATENCY_TYPE = 4
    CONFIG_RESET = 5
    CONFIG_GET = 6
    CONFIG_AUTO_STANDBY = 7


class StandbyType(IntEnum):
    START = 0
    STANDBY = 1


# ---------- 语义模型 ----------
class Command(NamedTuple):
    cmd_type: CommandType
    value: int

    def __str__(self):
        return f"{self.cmd_type.name}({self.value})"


class UserCmd(NamedTuple):
    cmd_type: UserCmdType
    # STANDBY_TYPE 时为 StandbyType，其余为原始数值
    value: Union[int, StandbyType]

    def __str__(self):
        value = self.value.name if isinstance(self.value, StandbyType) else self.value
        return f"{self.cmd_type.name}({value})"


class UserCmdAck(NamedTuple):
    cmd: UserCmd
    status: AckStatus

    def __str__(self):
        return f"Ack::UserCmd({self.cmd}, {self.status.name})"


class CommandAck(NamedTuple):
    cmd: Command
    status: AckStatus

    def __str__(self):
        return f"Ack::Command({self.cmd}, {self.status.name})"


class WorkModeAck(NamedTuple):
    cmd_type: int  # 实测恒为 0
    cmd_value: int  # 实测恒为 0
    status: AckStatus

    def __str__(self):
        return f"Ack::WorkMode(type:{self.cmd_type}, value:{self.cmd_value}, {self.status.name})"


Ack = Union[UserCmdAck, CommandAck, WorkModeAck]


class WorkMode(NamedTuple):
    """工作模式位域 (bit 0-4)"""
    wide_angle: bool  # bit0 0: 标准视场 180°, 1: 广角 192°
    measure_2d: bool  # bit1 0: 3D 测量, 1: 2D 测量
    disable_imu: bool  # bit2 0: 开启 IMU, 1: 关闭 IMU
    serial_mode: bool  # bit3 0: 以太网, 1: 串口
    wait_start: bool  # bit4 0: 上电自动启动, 1: 上电等待启动命令

    def __str__(self):
        return (
            f"WorkMode(angle:{'192°' if self.wide_angle else '180°'}, "
            f"{'2D' if self.measure_2d else '3D'}, "
            f"imu:{'off' if self.disable_imu else 'on'}, "
            f"interface:{'serial' if self.serial_mode else 'ethernet'}, "
            f"start:{'manual' if self.wait_start else 'auto'})"
        )


class Version(NamedTuple):
    hardware: Tuple[int, int, int, int]
    software: Tuple[int, int, int, int]
    name: str
    date: str  # 20YY-MM-DD

    def __str__(self):
        hw = ".".join(str(part) for part in self.hardware)
        sw = ".".join(str(part) for part in self.software)
        return f"hw:{hw}, sw:{sw}, name:'{self.name}', compiled:'{self.date}'"


# ---------- 定长记录 ----------
class TimeStamp(NamedTuple):
    sec: int
    nsec: int

    LEN = 8

    @classmethod
    def parse(cls, data: bytes) -> Tuple["TimeStamp", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        reader = FieldReader(chunk, "TimeStamp")
        stamp = cls(reader.u32(), reader.u32())
        reader.finish()
        return stamp, remainder

    def __str__(self):
        return f"{self.sec}.{self.nsec:09d}"


class DataInfo(NamedTuple):
    seq: int  # 包序号，连续递增
    payload_size: int
    stamp: TimeStamp

    LEN = 16

    @classmethod
    def parse(cls, data: bytes) -> Tuple["DataInfo", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        reader = FieldReader(chunk, "DataInfo")
        seq = reader.u32()
        payload_size = reader.u32()
        stamp, _ = TimeStamp.parse(reader.raw(TimeStamp.LEN))
        reader.finish()
        return cls(seq, payload_size, stamp), remainder

    def __str__(self):
        return f"#{self.seq} len:{self.payload_size}, time:{self.stamp}"


class LidarInsideState(NamedTuple):
    sys_rotation_period: int  # 水平低速电机周期
    com_rotation_period: int  # 垂直高速电机周期
    dirty_index: float  # 光学窗口脏污指数
    packet_lost_up: float
    packet_lost_down: float
    apd_temperature: float  # ℃
    apd_voltage: float  # V
    laser_voltage: float  # V
    imu_temperature: float

    LEN = 36

    @classmethod
    def parse(cls, data: bytes) -> Tuple["LidarInsideState", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        reader = FieldReader(chunk, "LidarInsideState")
        state = cls(
            sys_rotation_period=reader.u32(),
            com_rotation_period=reader.u32(),
            dirty_index=reader.f32(),
            packet_lost_up=reader.f32(),
            packet_lost_down=reader.f32(),
            apd_temperature=reader.f32(),
            apd_voltage=reader.f32(),
            laser_voltage=reader.f32(),
            imu_temperature=reader.f32(),
        )
        reader.finish()
        return state, remainder


class LidarCalibParam(NamedTuple):
    a_axis_dist: float  # m
    b_axis_dist: float  # m
    theta_angle_bias: float  # rad
    alpha_angle_bias: float  # rad
    beta_angle: float  # rad
    xi_angle: float  # rad
    range_bias: float  # mm
    range_scale: float

    LEN = 32

    @classmethod
    def parse(cls, data: bytes) -> Tuple["LidarCalibParam", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        reader = FieldReader(chunk, "LidarCalibParam")
        param = cls(*reader.array("f", 8))
        reader.finish()
        return param, remainder


class LidarPointData(NamedTuple):
    """3D 点云数据包 (1020 字节)"""
    info: DataInfo
    state: LidarInsideState
    param: LidarCalibParam
    com_horizontal_angle_start: float
    com_horizontal_angle_step: float
    scan_period: float  # s
    range_min: float  # m
    range_max: float  # m
    angle_min: float  # rad
    angle_increment: float  # rad
    time_increment: float  # s
    point_num: int
    ranges: Tuple[int, ...]  # mm
    intensities: Tuple[int, ...]  # 0-255

    LEN = 1020

    @classmethod
    def parse(cls, data: bytes) -> Tuple["LidarPointData", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        info, rest = DataInfo.parse(chunk)
        state, rest = LidarInsideState.parse(rest)
        param, rest = LidarCalibParam.parse(rest)

        reader = FieldReader(rest, "LidarPointData")
        point_data = cls(
            info,
            state,
            param,
            com_horizontal_angle_start=reader.f32(),
            com_horizontal_angle_step=reader.f32(),
            scan_period=reader.f32(),
            range_min=reader.f32(),
            range_max=reader.f32(),
            angle_min=reader.f32(),
            angle_increment=reader.f32(),
            time_increment=reader.f32(),
            point_num=reader.u32(),
            ranges=reader.array("H", POINT_DATA_MAX_POINTS),
            intensities=reader.array("B", POINT_DATA_MAX_POINTS),
        )
        reader.finish()
        return point_data, remainder

    def points(self) -> Iterator[Tuple[int, int]]:
        """有效测距点 (距离 mm, 反射强度)"""
        count = min(self.point_num, POINT_DATA_MAX_POINTS)
        return zip(self.ranges[:count], self.intensities[:count])

    def __str__(self):
        return (
            f"info:{self.info}, points:{self.point_num}, "
            f"h_angle:{self.com_horizontal_angle_start:.4f}+{self.com_horizontal_angle_step:.4f}, "
            f"apd:{self.state.apd_temperature:.1f}°C"
        )


class LidarImuData(NamedTuple):
    """IMU 数据包 (56 字节)"""
    info: DataInfo
    quaternion: Tuple[float, float, float, float]
    angular_velocity: Tuple[float, float, float]
    linear_acceleration: Tuple[float, float, float]

    LEN = 56

    @classmethod
    def parse(cls, data: bytes) -> Tuple["LidarImuData", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        info, rest = DataInfo.parse(chunk)

        reader = FieldReader(rest, "LidarImuData")
        imu = cls(
            info,
            quaternion=reader.array("f", 4),
            angular_velocity=reader.array("f", 3),
            linear_acceleration=reader.array("f", 3),
        )
        reader.finish()
        return imu, remainder

    def __str__(self):
        quat = ", ".join(f"{v}" for v in self.quaternion)
        ang = ", ".join(f"{v}" for v in self.angular_velocity)
        acc = ", ".join(f"{v}" for v in self.linear_acceleration)
        return f"info:{self.info}, quat:[{quat}], ang_vel:[{ang}], accel:[{acc}]"


# ---------- 原始记录 (需进一步语义解析) ----------
class LidarAckData(NamedTuple):
    """应答记录 (16 字节)，设备收到用户包后回复"""
    packet_type: int  # 设备收到的包类型
    cmd_type: int
    cmd_value: int
    status: int

    LEN = 16

    @classmethod
    def parse(cls, data: bytes) -> Tuple["LidarAckData", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        reader = FieldReader(chunk, "LidarAckData")
        record = cls(*reader.array("I", 4))
        reader.finish()
        return record, remainder


class LidarCmdRecord(NamedTuple):
    """用户控制命令/设备命令共用的 (类型, 数值) 记录 (8 字节)"""
    cmd_type: int
    cmd_value: int

    LEN = 8

    @classmethod
    def parse(cls, data: bytes) -> Tuple["LidarCmdRecord", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        reader = FieldReader(chunk, "LidarCmdRecord")
        record = cls(reader.u32(), reader.u32())
        reader.finish()
        return record, remainder


class LidarVersionData(NamedTuple):
    """版本记录 (80 字节)"""
    hw_version: bytes
    sw_version: bytes
    name: bytes
    date: bytes
    reserve: bytes

    LEN = 80

    @classmethod
    def parse(cls, data: bytes) -> Tuple["LidarVersionData", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        reader = FieldReader(chunk, "LidarVersionData")
        record = cls(
            hw_version=reader.raw(4),
            sw_version=reader.raw(4),
            name=reader.raw(24),
            date=reader.raw(8),
            reserve=reader.raw(40),
        )
        reader.finish()
        return record, remainder


class LidarWorkModeConfig(NamedTuple):
    mode: int

    LEN = 4

    @classmethod
    def parse(cls, data: bytes) -> Tuple["LidarWorkModeConfig", bytes]:
        chunk, remainder = split_at(data, cls.LEN)
        reader = FieldReader(chunk, "LidarWorkModeConfig")
        record = cls(reader.u32())
        reader.finish()
        return record, remainder


# ---------- 顶层数据包 ----------
class Packet(NamedTuple):
    """
    解码后的数据包

    data 为对应类型的解码结果；未经验证的类型
    (2D 点云、时间戳、IP/MAC 配置、参数数据) 为原始载荷 bytes。
    """
    packet_type: PacketType
    data: Any

    @property
    def is_opaque(self) -> bool:
        return isinstance(self.data, bytes)
