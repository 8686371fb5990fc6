"""项目内使用的自定义异常定义。"""


class WebpMirrorError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(WebpMirrorError):
    """配置不合法时抛出。"""


class DiscoveryError(WebpMirrorError):
    """扫描输入目录失败时抛出，整个任务随之中止。"""
