"""
Schemas package

本包保持“安静”：不做聚合导出，需要时显式从具体模块导入，例如：
    from ordercache.schemas.order import RemoteOrder
"""

__all__: list[str] = []
