"""常量定义：集中维护 HTTP 状态码与业务层共享的固定值。"""

from fastapi import status

HTTP_STATUS_OK = status.HTTP_200_OK
HTTP_STATUS_BAD_REQUEST = status.HTTP_400_BAD_REQUEST
HTTP_STATUS_UNAUTHORIZED = status.HTTP_401_UNAUTHORIZED
HTTP_STATUS_FORBIDDEN = status.HTTP_403_FORBIDDEN
HTTP_STATUS_NOT_FOUND = status.HTTP_404_NOT_FOUND
HTTP_STATUS_CONFLICT = status.HTTP_409_CONFLICT
HTTP_STATUS_PAYLOAD_TOO_LARGE = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
HTTP_STATUS_BAD_GATEWAY = status.HTTP_502_BAD_GATEWAY

ACCESS_TOKEN_TYPE = "bearer"

# 商户访问令牌：16 位大写十六进制
ONBOARDING_TOKEN_LENGTH = 16

ATTACHMENT_TABLE_NAME = "product_setup_attachments"
DENIED_ATTACHMENT_EXTENSIONS = frozenset({".exe", ".bat", ".cmd", ".ps1", ".sh", ".js", ".msi"})

DEFAULT_MIME_TYPE = "application/octet-stream"
