"""Channels — входные точки покупок (нативная монета и stable-активы)."""

from .base import ChannelState, SaleChannel
from .native import NativeChannelConfig, NativeSaleChannel
from .stable import StableSaleChannel

__all__ = [
    "SaleChannel",
    "ChannelState",
    "NativeSaleChannel",
    "NativeChannelConfig",
    "StableSaleChannel",
]
