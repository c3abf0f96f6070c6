"""Stored record types and the gateway contract they implement."""

from assetmanager.models.asset_type import AssetType
from assetmanager.models.gateway import RecordGateway

__all__ = ["AssetType", "RecordGateway"]
