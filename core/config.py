"""
配置文件 - 项目配置管理
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from pydantic import model_validator

class PaystackSettings(BaseModel):
    # Bearer 认证使用的密钥，绝不回显给客户端
    secret_key: Optional[str] = None
    base_url: str = "https://api.paystack.co"
    dashboard_url: str = "https://dashboard.paystack.com"
    timeout: float = 30.0
    # 默认每次调用只请求一次，需要重试时显式配置
    max_retries: int = 0
    retry_delay: float = 0.5

class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = Field(default="Paystack Transaction Lookup")
    VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")

    paystack: PaystackSettings = Field(default_factory=PaystackSettings)

    # 兼容直接导出 PAYSTACK_SECRET_KEY 的部署环境
    PAYSTACK_SECRET_KEY: Optional[str] = Field(default=None)

    # 页面访问网关的地址；为空时在进程内调用
    GATEWAY_BASE_URL: Optional[str] = Field(default=None)

    # CORS配置
    CORS_ORIGINS: list = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
    )

    # pydantic-settings v2 配置
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    @model_validator(mode="after")
    def _merge_paystack_secret(self):
        # 优先使用 PAYSTACK__SECRET_KEY，否则回退到扁平变量
        if not self.paystack.secret_key and self.PAYSTACK_SECRET_KEY:
            self.paystack.secret_key = self.PAYSTACK_SECRET_KEY
        return self

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """支持JSON数组字符串或逗号分隔字符串"""
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                import json
                try:
                    arr = json.loads(s)
                    if isinstance(arr, list):
                        return arr
                except ValueError:
                    pass
            if "," in s:
                return [item.strip() for item in s.split(",") if item.strip()]
            return [s]
        return v

settings = Settings()
