class LeafPackError(Exception):
    """遍历/打包/清理相关的自定义异常"""
    def __init__(self, message: str, original_error: Exception = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class PreconditionError(LeafPackError):
    """根目录不存在或不是目录，整个运行直接终止"""


class BranchIOError(LeafPackError):
    """子树目录读取失败，只丢弃该子树的结果"""


class LeafPolicyError(LeafPackError):
    """叶子目录策略(压缩/清理)执行失败"""
