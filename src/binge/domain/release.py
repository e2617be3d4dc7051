"""Release metadata returned by the GitHub releases API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class AssetRef:
    """A downloadable release asset.

    Attributes:
        filename: Asset filename as published
        download_url: Direct download URL (``browser_download_url``)

    """

    filename: str
    download_url: str

    @classmethod
    def from_api_response(cls, asset_data: Any) -> AssetRef | None:
        """Create an AssetRef from one entry of the ``assets`` array.

        Returns:
            AssetRef, or None if required fields are missing

        """
        if not isinstance(asset_data, dict):
            return None
        name = asset_data.get("name")
        url = asset_data.get("browser_download_url")
        if not isinstance(name, str) or not isinstance(url, str):
            return None
        if not name or not url:
            return None
        return cls(filename=name, download_url=url)


@dataclass(slots=True, frozen=True)
class ReleaseDescriptor:
    """Latest release of a repository: its tag and ordered assets."""

    tag: str
    assets: tuple[AssetRef, ...]

    @classmethod
    def from_api_response(cls, api_data: Any) -> ReleaseDescriptor:
        """Build a descriptor from the ``releases/latest`` JSON body.

        Raises:
            ValueError: If the body is not an object with a string
                ``tag_name`` and a list of ``assets``

        """
        if not isinstance(api_data, dict):
            msg = f"expected a JSON object, got {type(api_data).__name__}"
            raise ValueError(msg)

        tag = api_data.get("tag_name")
        if not isinstance(tag, str) or not tag:
            msg = "release has no 'tag_name'"
            raise ValueError(msg)

        raw_assets = api_data.get("assets", [])
        if not isinstance(raw_assets, list):
            msg = "release 'assets' is not a list"
            raise ValueError(msg)

        assets = tuple(
            asset
            for asset in map(AssetRef.from_api_response, raw_assets)
            if asset is not None
        )
        return cls(tag=tag, assets=assets)
