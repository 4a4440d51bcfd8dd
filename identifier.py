"""
identifier.py — what is in the photo?

identify() runs exactly once per analysis and seeds everything downstream,
so any failure here is fatal. guess_attributes() is the fallback used only
when no catalog source knows the ingredients of a product.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Union

import aiohttp

import config
from errors import FetchError, IdentificationError
from models import AttributeGuess, ProductIdentity
from providers.base import JudgmentProvider

logger = logging.getLogger(__name__)

ImageInput = Union[bytes, str]


async def load_image(image: ImageInput) -> bytes:
    """Resolve raw bytes or an http(s) URL into image bytes."""
    if isinstance(image, (bytes, bytearray)):
        return bytes(image)
    if not isinstance(image, str) or not image.startswith(("http://", "https://")):
        raise ValueError("image must be bytes or an http(s) URL")

    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                image,
                headers={"User-Agent": config.USER_AGENT},
                timeout=aiohttp.ClientTimeout(total=config.FETCH_TIMEOUT),
            ) as resp:
                if resp.status != 200:
                    raise FetchError(f"Image fetch failed: HTTP {resp.status} for {image}", status=resp.status)
                return await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise FetchError(f"Image fetch failed for {image}: {exc!r}") from exc


def _clean_list(values) -> list[str]:
    """Strings only, trimmed, first occurrence kept."""
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, list):
        return []
    cleaned: list[str] = []
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned


def _optional_str(value) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value.lower() in ("null", "none", "unknown", "n/a"):
        return None
    return value


async def identify(image: ImageInput, provider: JudgmentProvider) -> ProductIdentity:
    image_bytes = await load_image(image)
    try:
        data = await provider.identify_product(image_bytes)
    except Exception as exc:
        raise IdentificationError(f"Could not identify product: {exc}") from exc

    name = _optional_str(data.get("name"))
    if not name:
        raise IdentificationError("Could not identify product: response has no 'name'", {"response": data})

    identity = ProductIdentity(name=name, brand=_optional_str(data.get("brand")))
    logger.info("Identified product: %s (brand=%s)", identity.name, identity.brand)
    return identity


async def guess_attributes(image: ImageInput, provider: JudgmentProvider) -> AttributeGuess:
    image_bytes = await load_image(image)
    try:
        data = await provider.guess_attributes(image_bytes)
    except Exception as exc:
        raise IdentificationError(f"Could not guess product attributes: {exc}") from exc

    if not isinstance(data.get("ingredients"), (list, str)):
        raise IdentificationError(
            "Could not guess product attributes: response has no 'ingredients' list",
            {"response": data},
        )

    packaging = data.get("packaging")
    if isinstance(packaging, dict):
        materials = _clean_list(packaging.get("materials"))
        recyclable = packaging.get("recyclable") is True
        description = _optional_str(packaging.get("description")) or ""
    else:
        # Some models flatten packaging into a bare list of materials
        materials = _clean_list(packaging)
        recyclable = data.get("recyclable") is True
        description = ""

    guess = AttributeGuess(
        ingredients=_clean_list(data.get("ingredients")),
        packaging_materials=_clean_list([m.lower() for m in materials]),
        recyclable=recyclable,
        packaging_description=description,
    )
    logger.info(
        "Vision fallback: %d ingredient(s), materials=%s, recyclable=%s",
        len(guess.ingredients), guess.packaging_materials, guess.recyclable,
    )
    return guess
