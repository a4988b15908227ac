"""Models used for API request and response payloads."""

from hearth_backend.api.models.auth import SignInRequest, SignInResponse
from hearth_backend.api.models.common import (
    ApiEnvelope,
    ApiModel,
    PurchaseRequest,
    RequestItem,
    utc_from_ms,
)
from hearth_backend.api.models.inventory import (
    HotbarSlotPayload,
    HotbarSlotRequest,
    InstancePayload,
    InventoryResponse,
    NonStackableItemPayload,
    SeenAt,
    StackableItemPayload,
)
from hearth_backend.api.models.workshop import (
    BurningPayload,
    BurnRatePayload,
    CollectResponse,
    CraftingSlotResponse,
    CraftingStartRequest,
    EscrowEntry,
    FinishPriceResponse,
    FuelPayload,
    ItemQuantity,
    RewardItem,
    Rewards,
    SmeltingSlotResponse,
    SmeltingStartRequest,
    SplitRubiesResponse,
    UnlockPrice,
    UtilityBlocksResponse,
)

__all__ = [
    "ApiEnvelope",
    "ApiModel",
    "BurnRatePayload",
    "BurningPayload",
    "CollectResponse",
    "CraftingSlotResponse",
    "CraftingStartRequest",
    "EscrowEntry",
    "FinishPriceResponse",
    "FuelPayload",
    "HotbarSlotPayload",
    "HotbarSlotRequest",
    "InstancePayload",
    "InventoryResponse",
    "ItemQuantity",
    "NonStackableItemPayload",
    "PurchaseRequest",
    "RequestItem",
    "RewardItem",
    "Rewards",
    "SeenAt",
    "SignInRequest",
    "SignInResponse",
    "SmeltingSlotResponse",
    "SmeltingStartRequest",
    "SplitRubiesResponse",
    "StackableItemPayload",
    "UnlockPrice",
    "UtilityBlocksResponse",
]
