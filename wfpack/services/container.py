"""服务容器 — 由同一份 Config 与命令执行器懒加载五个阶段组件

用法:
    container = ServiceContainer(config=Config.from_file("wfpack.yml"))
    container.resolver.resolve(None)

测试时可注入记录型执行器，或直接用 MagicMock 替代整个容器。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wfpack.core.config import Config
from wfpack.utils.shell import CommandExecutor, LocalExecutor

if TYPE_CHECKING:
    from wfpack.core.assembler import PackageAssembler
    from wfpack.core.environment import EnvironmentDetector
    from wfpack.core.fetcher import ArtifactFetcher
    from wfpack.core.installer import Installer
    from wfpack.core.resolver import VersionResolver

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载容器 — 每个属性首次访问时构造并缓存"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        self._config = config or Config()
        self._executor = executor or LocalExecutor()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    @property
    def resolver(self) -> VersionResolver:
        if "resolver" not in self._instances:
            from wfpack.core.resolver import VersionResolver
            self._instances["resolver"] = VersionResolver(self._config, self._executor)
        return self._instances["resolver"]  # type: ignore[return-value]

    @property
    def environment(self) -> EnvironmentDetector:
        if "environment" not in self._instances:
            from wfpack.core.environment import EnvironmentDetector
            self._instances["environment"] = EnvironmentDetector(self._config)
        return self._instances["environment"]  # type: ignore[return-value]

    @property
    def fetcher(self) -> ArtifactFetcher:
        if "fetcher" not in self._instances:
            from wfpack.core.fetcher import ArtifactFetcher
            self._instances["fetcher"] = ArtifactFetcher(self._config)
        return self._instances["fetcher"]  # type: ignore[return-value]

    @property
    def assembler(self) -> PackageAssembler:
        if "assembler" not in self._instances:
            from wfpack.core.assembler import PackageAssembler
            self._instances["assembler"] = PackageAssembler(self._config, self._executor)
        return self._instances["assembler"]  # type: ignore[return-value]

    @property
    def installer(self) -> Installer:
        if "installer" not in self._instances:
            from wfpack.core.installer import Installer
            self._instances["installer"] = Installer(self._config, self._executor)
        return self._instances["installer"]  # type: ignore[return-value]
