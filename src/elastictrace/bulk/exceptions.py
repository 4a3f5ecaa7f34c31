"""批量写入异常定义模块."""

from ..exceptions import ElasticTraceError


class BulkOperationError(ElasticTraceError):
    """批量写入基础异常类."""

    pass


class BulkValidationError(BulkOperationError):
    """批量写入参数校验异常."""

    pass
