"""wfpack - 将 Waterfox 上游二进制包重新打包为 .deb 并安装"""

__version__ = "1.3.0"
