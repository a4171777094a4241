"""
Digiflazz 请求签名

sign = md5(username + api_key + discriminant)，小写十六进制，UTF-8编码。
上游契约是单次固定算法哈希：没有盐，没有迭代。
"""

import hashlib
from dataclasses import dataclass


@dataclass(frozen=True)
class SignatureInput:
    username: str
    api_key: str
    discriminant: str

    def __repr__(self) -> str:
        return (
            f"SignatureInput(username={self.username!r}, api_key='****', "
            f"discriminant={self.discriminant!r})"
        )


def generate_signature(username: str, api_key: str, discriminant: str) -> str:
    """计算签名"""
    raw = f"{username}{api_key}{discriminant}"
    return hashlib.md5(raw.encode("utf-8"), usedforsecurity=False).hexdigest()


def sign(signature_input: SignatureInput) -> str:
    return generate_signature(
        signature_input.username,
        signature_input.api_key,
        signature_input.discriminant,
    )
