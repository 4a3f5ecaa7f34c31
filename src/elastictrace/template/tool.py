"""索引模板初始化核心工具类."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..connection import CallFactory, HttpNotFoundError, HttpRequest
from ..core.lazy import InitState, Lazy
from ..parsers import read_path
from .exceptions import TemplateInstallError
from .models import TemplateBranch
from .renderer import IndexTemplateRenderer

logger = logging.getLogger(__name__)


class SchemaBootstrapper:
    """索引模板初始化器.

    在第一次读写之前确保集群中存在与版本兼容的索引模板：
    1. 读取集群版本号（GET /）
    2. 按主版本选择模板分支，不支持的版本直接失败
    3. 检查模板是否存在（GET /_template/{name}），只有 404 视为不存在
    4. 不存在时原样安装渲染好的模板（PUT /_template/{name}）

    已存在的模板从不修改，运维人员在外部管理的分片和副本设置不会被覆盖。
    整个过程每个进程只成功执行一次，并发调用方阻塞等待同一次检查。
    版本不受支持时永久失败；通信失败不会被记住，下一次 ensure() 重新检查。

    Args:
        http_supplier: 返回调用工厂的函数，首次初始化时调用
        renderer: 索引模板渲染器
        template_name: 模板名称，默认 {index}_template
    """

    def __init__(
        self,
        http_supplier: Callable[[], CallFactory],
        renderer: IndexTemplateRenderer,
        template_name: str | None = None,
    ) -> None:
        self._http_supplier = http_supplier
        self.renderer = renderer
        self.template_name = template_name or f"{renderer.index}_template"
        self._lazy = Lazy(self._bootstrap, name=f"ensure-{self.template_name}")

    @property
    def state(self) -> InitState:
        """当前初始化状态."""
        return self._lazy.state

    def ensure(self) -> None:
        """确保模板已就绪，阻塞直到首次初始化完成.

        Raises:
            UnsupportedVersionError: 集群版本不受支持
            TemplateInstallError: 版本号无法读取
            HttpCallError: 与集群通信失败
        """
        self._lazy.get()

    def _bootstrap(self) -> None:
        version = self.get_version()
        branch = TemplateBranch.from_version(version)
        logger.info(
            f"集群版本 {version}，使用 {branch.name} 模板分支: {self.template_name}"
        )
        self.ensure_template(self.template_name, self.renderer.render_json(branch))

    def get_version(self) -> str:
        """读取集群自报的版本号 .version.number.

        Raises:
            TemplateInstallError: 响应中没有版本号
        """
        http = self._http_supplier()
        request = HttpRequest.build("GET", "", tag="get-node")

        def convert(body: bytes) -> str:
            version = read_path(body, "version", "number")
            if not isinstance(version, str):
                raise TemplateInstallError(".version.number 不在响应中")
            return version

        return http.execute(request, convert)

    def ensure_template(self, name: str, index_template: str) -> bool:
        """模板不存在时安装，阻塞调用.

        Args:
            name: 模板名称
            index_template: 模板 JSON

        Returns:
            本次是否安装了模板；已存在时返回 False
        """
        http = self._http_supplier()
        get_template = HttpRequest.build("GET", "_template", name, tag="get-template")
        try:
            http.execute(get_template, lambda body: None)
            logger.info(f"索引模板 '{name}' 已存在，跳过安装")
            return False
        except HttpNotFoundError:
            logger.info(f"索引模板 '{name}' 不存在，开始安装")

        put_template = HttpRequest.build(
            "PUT", "_template", name, tag="update-template", body=index_template
        )
        http.execute(put_template, lambda body: None)
        logger.info(f"索引模板 '{name}' 安装成功")
        return True

    def __repr__(self) -> str:
        return f"SchemaBootstrapper({self.template_name}, state={self.state.value})"
