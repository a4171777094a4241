"""
Webhook签名校验
X-Digiflazz-Signature = HMAC-SHA1(secret, 原始请求体) 的十六进制，可带 "sha1=" 前缀
"""

import hashlib
import hmac
from typing import Optional, Union

from core.exceptions import ConfigurationException, ErrorCode, WebhookSignatureError

SIGNATURE_HEADER = "X-Digiflazz-Signature"
EVENT_HEADER = "X-Digiflazz-Event"


def compute_signature(secret: str, raw_body: Union[bytes, str]) -> str:
    if isinstance(raw_body, str):
        raw_body = raw_body.encode("utf-8")
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha1).hexdigest()


class WebhookVerifier:
    """校验回调签名"""

    def __init__(self, secret: Optional[str]):
        if not secret:
            raise ConfigurationException(
                ErrorCode.CONFIG_MISSING_REQUIRED,
                message="Webhook secret is not configured",
            )
        self._secret = secret

    def verify(self, raw_body: Union[bytes, str], signature: Optional[str]) -> None:
        """
        Raises:
            WebhookSignatureError: 签名缺失或不匹配
        """
        if not signature:
            raise WebhookSignatureError(ErrorCode.WEBHOOK_SIGNATURE_MISSING)

        provided = signature.strip()
        if provided.lower().startswith("sha1="):
            provided = provided[len("sha1="):]

        expected = compute_signature(self._secret, raw_body)
        if not hmac.compare_digest(expected, provided.lower()):
            raise WebhookSignatureError(ErrorCode.WEBHOOK_SIGNATURE_INVALID)
