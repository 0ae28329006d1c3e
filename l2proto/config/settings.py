from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    # 基础配置
    ENV: str = Field(default="dev", validation_alias="ENV")
    DEBUG: bool = False

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: Optional[str] = None  # 例: logs/app.log
    LOG_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT: int = 5

    # 串口配置
    SERIAL_PORT: str = "/dev/ttyACM0"
    SERIAL_BAUD_RATE: int = 4_000_000
    SERIAL_TIMEOUT: float = 1.0
    SERIAL_READ_SIZE: int = 65536

    # UDP配置 (雷达默认地址 192.168.1.62:6101)
    LIDAR_IP: str = "192.168.1.62"
    LIDAR_PORT: int = 6101
    LOCAL_IP: str = "192.168.1.2"
    LOCAL_PORT: int = 6201
    UDP_MAX_SIZE: int = 65535

    # 协议配置
    # 工作模式包类型码为推测值，抓包确认后可通过环境变量覆盖
    WORK_MODE_PACKET_TYPE: int = Field(default=2002, ge=0, le=0xFFFFFFFF)
    # 流式拼帧允许的最大帧长，超过即视为错误帧
    MAX_FRAME_SIZE: int = Field(default=64 * 1024, ge=24)

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


def get_settings() -> Settings:
    return Settings()
