"""
ordercache：店铺管理客户端的本地订单缓存。

远端订单快照（RemoteOrder）经由 upsert 用例落入本地 SQLAlchemy 存储（Order），
并保证交还给调用方的每条记录都持有永久标识。
"""

__version__ = "0.1.0"
