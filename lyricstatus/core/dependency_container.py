"""
依赖注入容器 - 组装歌词状态监视器的各个组件

按声明的依赖顺序创建组件，保证认证、播放源、歌词源、状态通知器
和播放追踪器之间的初始化顺序正确，并在启动时检测循环依赖。
"""

import logging
from typing import Dict, Any, Optional, Callable, List
from dataclasses import dataclass, field


@dataclass
class DependencyRegistration:
    """依赖项注册信息"""
    factory: Callable[..., Any]
    dependencies: List[str] = field(default_factory=list)
    instance: Optional[Any] = None
    initialized: bool = False


class DependencyContainer:
    """
    依赖注入容器

    所有组件均为单例：整个进程只有一个监视器会话，
    每个组件只需创建一次。
    """

    def __init__(self):
        """初始化依赖容器"""
        self.logger = logging.getLogger("lyricstatus.core.dependency")
        self._registrations: Dict[str, DependencyRegistration] = {}
        self._initialization_order: List[str] = []
        self._initializing: set = set()

    def register(
        self,
        name: str,
        factory: Callable[..., Any],
        dependencies: Optional[List[str]] = None
    ) -> None:
        """
        注册组件

        Args:
            name: 组件名称，同时也是工厂函数的关键字参数名
            factory: 创建实例的工厂函数
            dependencies: 依赖的其他组件名称列表

        Raises:
            ValueError: 组件已注册
        """
        if name in self._registrations:
            raise ValueError(f"依赖项 '{name}' 已经注册")

        self._registrations[name] = DependencyRegistration(
            factory=factory,
            dependencies=list(dependencies or [])
        )
        self.logger.debug(f"📝 注册依赖项: {name}")

    def resolve(self, name: str) -> Any:
        """
        解析组件

        Args:
            name: 组件名称

        Returns:
            组件实例

        Raises:
            ValueError: 组件未注册
            RuntimeError: 循环依赖或工厂函数失败
        """
        if name not in self._registrations:
            raise ValueError(f"依赖项 '{name}' 未注册")

        registration = self._registrations[name]
        if registration.initialized:
            return registration.instance

        if name in self._initializing:
            raise RuntimeError(f"检测到循环依赖: {name}")

        try:
            self._initializing.add(name)
            self.logger.debug(f"🔧 开始解析依赖项: {name}")

            kwargs = {dep: self.resolve(dep) for dep in registration.dependencies}
            registration.instance = registration.factory(**kwargs)
            registration.initialized = True
            self._initialization_order.append(name)

            self.logger.debug(f"✅ 依赖项解析完成: {name}")
            return registration.instance

        except RuntimeError:
            raise
        except Exception as e:
            self.logger.error(f"❌ 依赖项解析失败: {name} - {e}", exc_info=True)
            raise RuntimeError(f"依赖项 '{name}' 解析失败: {e}") from e
        finally:
            self._initializing.discard(name)

    def validate_dependencies(self) -> bool:
        """
        验证依赖关系（所有依赖均已注册且无循环）

        Returns:
            True 如果依赖关系有效

        Raises:
            RuntimeError: 存在未注册的依赖或循环依赖
        """
        visited = set()
        rec_stack = set()

        def has_cycle(node: str) -> bool:
            if node in rec_stack:
                return True
            if node in visited:
                return False

            visited.add(node)
            rec_stack.add(node)

            for dep in self._registrations[node].dependencies:
                if dep not in self._registrations:
                    raise RuntimeError(f"依赖项 '{dep}' 未注册（被 '{node}' 依赖）")
                if has_cycle(dep):
                    return True

            rec_stack.remove(node)
            return False

        for name in self._registrations:
            if name not in visited and has_cycle(name):
                raise RuntimeError(f"检测到循环依赖，涉及组件: {name}")

        self.logger.debug("✅ 依赖关系验证通过")
        return True

    @property
    def initialization_order(self) -> List[str]:
        """按实际创建顺序排列的组件名称"""
        return list(self._initialization_order)
