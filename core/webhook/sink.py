"""
交易事件存储
"""

import asyncio
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from core.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class TransactionRecord:
    """一笔由回调记录的交易"""

    ref_id: str
    buyer_tx_id: Optional[str] = None
    customer_no: Optional[str] = None
    buyer_sku_code: Optional[str] = None
    status: Optional[str] = None
    message: Optional[str] = None
    rc: Optional[str] = None
    sn: str = ""
    price: Any = None
    buyer_last_saldo: Any = None
    tele: Optional[str] = None
    wa: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_event(cls, data: Mapping[str, Any]) -> "TransactionRecord":
        names = {f.name for f in fields(cls)} - {"ref_id", "created_at", "updated_at"}
        values = {name: data[name] for name in names if data.get(name) is not None}
        values["sn"] = data.get("sn") or ""
        return cls(ref_id=str(data.get("ref_id") or data.get("buyer_tx_id")), **values)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["created_at"] = self.created_at.isoformat()
        result["updated_at"] = self.updated_at.isoformat()
        return result


# update 事件允许修改的字段
UPDATABLE_FIELDS = ("status", "message", "sn", "rc", "buyer_last_saldo")

# 内存实现默认保留的交易数
DEFAULT_MAX_RECORDS = 10000


class TransactionEventSink(ABC):
    """回调事件的持久化接口"""

    @abstractmethod
    async def record_created(self, data: Mapping[str, Any]) -> TransactionRecord:
        """记录新交易"""

    @abstractmethod
    async def record_updated(
        self, match_id: str, data: Mapping[str, Any]
    ) -> Optional[TransactionRecord]:
        """
        按本地 ref_id 更新交易

        Returns:
            更新后的记录；没有匹配时返回None
        """


class InMemoryTransactionSink(TransactionEventSink):
    """
    内存实现，按 ref_id 索引

    最多保留 max_records 条，超出时淘汰最早记录的交易；进程重启后数据丢失，
    生产环境应注入持久化的 TransactionEventSink。
    """

    def __init__(self, max_records: int = DEFAULT_MAX_RECORDS):
        if max_records < 1:
            raise ValueError("max_records must be positive")
        self.max_records = max_records
        self.records: "OrderedDict[str, TransactionRecord]" = OrderedDict()
        self._lock = asyncio.Lock()

    async def record_created(self, data: Mapping[str, Any]) -> TransactionRecord:
        record = TransactionRecord.from_event(data)
        async with self._lock:
            self.records.pop(record.ref_id, None)
            self.records[record.ref_id] = record
            while len(self.records) > self.max_records:
                evicted, _ = self.records.popitem(last=False)
                logger.warning(f"内存交易记录已满，淘汰: {evicted}", max_records=self.max_records)
        logger.info(f"交易已记录: {record.ref_id}", status=record.status)
        return record

    async def record_updated(
        self, match_id: str, data: Mapping[str, Any]
    ) -> Optional[TransactionRecord]:
        async with self._lock:
            record = self.records.get(match_id)
            if record is None:
                return None
            for name in UPDATABLE_FIELDS:
                if name == "sn":
                    record.sn = data.get("sn") or ""
                elif name in data:
                    setattr(record, name, data[name])
            record.updated_at = datetime.now()
        logger.info(f"交易已更新: {match_id}", status=record.status)
        return record

    def get(self, ref_id: str) -> Optional[TransactionRecord]:
        return self.records.get(ref_id)
