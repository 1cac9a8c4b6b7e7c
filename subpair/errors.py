"""
错误类型
"""

from typing import Optional


class ValidationError(ValueError):
    """
    输入校验失败（路径格式错误、路径重复等）

    对整次调用是致命的：调用方需修正输入后重试。
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
