"""统一异常体系

所有业务异常继承 WfpackError，替代散落的 ValueError / RuntimeError。
CLI 层据此输出一行友好提示并以非零状态退出。
"""

from __future__ import annotations


class WfpackError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"
    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(WfpackError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(WfpackError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"


class ExecutionError(WfpackError):
    """外部命令执行失败"""

    code = "EXECUTION_ERROR"


class RegistryError(WfpackError):
    """无法从发布注册表获取最新版本"""

    code = "REGISTRY_ERROR"


class UnsupportedEnvironmentError(WfpackError):
    """宿主系统版本过旧"""

    code = "UNSUPPORTED_ENVIRONMENT"


class DownloadError(WfpackError):
    """归档下载失败"""

    code = "DOWNLOAD_ERROR"


class AssemblyError(WfpackError):
    """打包目录树写入或 dpkg-deb 构建失败"""

    code = "ASSEMBLY_ERROR"


class InstallError(WfpackError):
    """包管理器拒绝安装，携带其退出码"""

    code = "INSTALL_ERROR"

    def __init__(self, message: str, returncode: int = 1) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.exit_code = returncode or 1
