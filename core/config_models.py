"""
Pydantic models for configuration validation.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class Cors(BaseModel):
    allow_origin: str = "*"
    allow_headers: str = "Content-Type, Authorization"
    allow_methods: str = "GET, POST, OPTIONS"


class Server(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8888
    # 代理路由前缀，兼容 Netlify function 的路径形式
    route_prefix: str = "/digiflazz-proxy"
    cors: Cors = Field(default_factory=Cors)

    @field_validator("route_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip()
        if not value or value == "/":
            return ""
        return "/" + value.strip("/")


class Provider(BaseModel):
    name: str = "digiflazz"
    base_url: str = "https://api.digiflazz.com"
    timeout: float = 30.0
    # production 模式下禁止使用环境变量里的开发凭证
    mode: Literal["production", "development"] = "production"
    # 固定签名因子的覆盖，如 {"price-list": "pricelist"}
    discriminants: dict[str, str] = Field(default_factory=dict)


class StaticCredential(BaseModel):
    key_name: Literal["username", "apiKey"]
    value: str
    is_active: bool = True


class Credentials(BaseModel):
    source: Literal["database", "memory", "environment"] = "database"
    database_url: str = "sqlite+aiosqlite:///./ppob_proxy.db"
    # source=memory 时使用的静态凭证
    records: list[StaticCredential] = Field(default_factory=list)


class Webhook(BaseModel):
    enabled: bool = False
    path: str = "/payload"
    secret: Optional[str] = None
    # 未注入持久化存储时，内存中最多保留的交易数
    max_records: int = Field(default=10000, ge=1)


class Logging(BaseModel):
    level: str = "INFO"
    format: Literal["json", "text"] = "json"
    file: Optional[str] = "logs/ppob-proxy.log"
    max_file_size: int = 50 * 1024 * 1024
    backup_count: int = 5


class System(BaseModel):
    name: str = "PPOB Signing Proxy"
    version: str = "0.1.0"


class Config(BaseModel):
    system: System = Field(default_factory=System)
    server: Server = Field(default_factory=Server)
    provider: Provider = Field(default_factory=Provider)
    credentials: Credentials = Field(default_factory=Credentials)
    webhook: Webhook = Field(default_factory=Webhook)
    logging: Logging = Field(default_factory=Logging)
