"""
Webhook回调处理器
先校验签名，再按事件类型写入交易存储
"""

import json
from typing import Any, Mapping, Optional, Union

from core.exceptions import InvalidRequestBodyError, WebhookPayloadError
from core.utils.logger import get_logger

from .sink import TransactionEventSink
from .verifier import EVENT_HEADER, SIGNATURE_HEADER, WebhookVerifier

logger = get_logger(__name__)

ACK = {"success": True}


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    # starlette Headers 本身大小写无关，普通字典需要逐个比较
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, item in headers.items():
        if key.lower() == lowered:
            return item
    return None


class WebhookHandler:
    """Digiflazz 交易回调处理器"""

    def __init__(self, verifier: WebhookVerifier, sink: TransactionEventSink):
        self.verifier = verifier
        self.sink = sink

    async def process(
        self, raw_body: Union[bytes, str], headers: Mapping[str, str]
    ) -> dict[str, Any]:
        """
        处理一次回调

        Args:
            raw_body: 原始请求体（签名基于原始字节计算）
            headers: 请求头

        Returns:
            确认响应 {"success": true}

        Raises:
            WebhookSignatureError: 签名缺失或不匹配
            InvalidRequestBodyError: 请求体不是JSON对象
            WebhookPayloadError: update 事件缺少交易标识
        """
        self.verifier.verify(raw_body, _header(headers, SIGNATURE_HEADER))

        try:
            body = json.loads(raw_body or "{}")
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise InvalidRequestBodyError("webhook body is not valid JSON") from None
        if not isinstance(body, dict):
            raise InvalidRequestBodyError("webhook body must be a JSON object")

        event = body.get("event") or _header(headers, EVENT_HEADER) or "unknown"
        data = body.get("data")
        if not isinstance(data, dict):
            logger.warning("回调中没有 data 字段", webhook_event=event)
            return dict(ACK)

        if event == "create":
            await self.sink.record_created(data)
        elif event == "update":
            await self._handle_update(data)
        else:
            logger.info(f"忽略不支持的回调事件: {event}")

        return dict(ACK)

    async def _handle_update(self, data: Mapping[str, Any]) -> None:
        buyer_tx_id = data.get("buyer_tx_id")
        ref_id = data.get("ref_id")
        if not buyer_tx_id and not ref_id:
            raise WebhookPayloadError("Missing buyer_tx_id or ref_id")

        # 本地 ref_id 保存的是 buyer_tx_id（若有），优先按它匹配
        for match_id in (buyer_tx_id, ref_id):
            if match_id and await self.sink.record_updated(str(match_id), data):
                return

        logger.warning(
            "回调更新没有匹配到本地交易",
            buyer_tx_id=buyer_tx_id,
            ref_id=ref_id,
        )
