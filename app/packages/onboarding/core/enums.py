"""枚举定义：约束管理员角色、入驻类型与入驻状态的可选值。"""

from enum import Enum


class ManagerRoleEnum(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"


class OnboardingTypeEnum(str, Enum):
    """商户入驻所包含的服务类型。"""

    HARDWARE_DELIVERY = "hardware_delivery"
    HARDWARE_INSTALLATION = "hardware_installation"
    REMOTE_TRAINING = "remote_training"
    ONSITE_TRAINING = "onsite_training"


class OnboardingStatusEnum(str, Enum):
    """入驻记录状态。"""

    CREATED = "created"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CloudResourceTypeEnum(str, Enum):
    """Cloudinary 对存储内容的资源类型划分。"""

    AUTO = "auto"
    RAW = "raw"
    IMAGE = "image"
    VIDEO = "video"
