"""Typed failures of the LLM call.

Each error carries the HTTP status and the message shown to the end user.
The raw upstream exception is chained (``raise ... from``) and logged, never
returned to the client.
"""

from __future__ import annotations


class ChatError(Exception):
    """Base class for chat failures surfaced to the client."""

    status_code: int = 502
    error_type: str = "upstream_error"
    user_message: str = "AIサービスとの通信中にエラーが発生しました。しばらくしてから再度お試しください。"

    def __init__(self, detail: str = "", provider: str | None = None):
        super().__init__(detail or self.user_message)
        self.detail = detail
        self.provider = provider

    def to_payload(self) -> dict:
        return {
            "error": self.user_message,
            "errorType": self.error_type,
            "provider": self.provider,
        }


class ProviderNotConfiguredError(ChatError):
    """No API key (or an unknown provider) is configured."""

    status_code = 500
    error_type = "not_configured"
    user_message = "APIキーが設定されていません。サーバーの環境変数を確認してください。"

    def __init__(self, detail: str = "", provider: str | None = None, key_name: str | None = None):
        super().__init__(detail, provider)
        self.key_name = key_name

    def to_payload(self) -> dict:
        payload = super().to_payload()
        if self.key_name:
            payload["error"] = (
                f"APIキーが設定されていません。.envファイルに{self.key_name}を設定してください。"
            )
        return payload


class UpstreamRejectedError(ChatError):
    """The provider refused the request (quota, rate limit, invalid key)."""

    status_code = 429
    error_type = "upstream_rejected"
    user_message = "AIサービスの利用制限に達したか、リクエストが拒否されました。時間をおいて再度お試しください。"


class UpstreamTimeoutError(ChatError):
    """The provider did not answer within the configured timeout."""

    status_code = 504
    error_type = "upstream_timeout"
    user_message = "AIサービスの応答がタイムアウトしました。もう一度お試しください。"


class MalformedUpstreamResponseError(ChatError):
    """The provider answered but the response had no usable text."""

    status_code = 502
    error_type = "malformed_response"
    user_message = "AIサービスから有効な応答を取得できませんでした。質問を変えて再度お試しください。"


class UpstreamError(ChatError):
    """Any other provider failure (network, 5xx ...)."""
