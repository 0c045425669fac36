from .notification import (
    ActorInfo,
    BatchUpdateResponse,
    ChannelResultRead,
    EmailConfigOverride,
    EmailTestRequest,
    FeedItemRead,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationRead,
)

__all__ = [
    "ActorInfo",
    "BatchUpdateResponse",
    "ChannelResultRead",
    "EmailConfigOverride",
    "EmailTestRequest",
    "FeedItemRead",
    "NotificationCreate",
    "NotificationCreateResponse",
    "NotificationListResponse",
    "NotificationMarkReadRequest",
    "NotificationRead",
]
