"""
MAC address vendor lookup.

Resolves the manufacturer of a network card from its OUI using public
lookup APIs, trying each source in turn.

Dependencies: httpx
System role: Device manufacturer enrichment
"""

import logging

import httpx

logger = logging.getLogger(__name__)

UNKNOWN_VENDOR = "Desconocido"


async def _from_macvendors(client: httpx.AsyncClient, mac: str) -> str | None:
    response = await client.get(f"https://api.macvendors.com/{mac}")
    if response.status_code == 200 and response.text.strip():
        return response.text.strip()
    return None


async def _from_maclookup(client: httpx.AsyncClient, mac: str) -> str | None:
    response = await client.get(f"https://api.maclookup.app/v2/macs/{mac}")
    if response.status_code != 200:
        return None
    data = response.json()
    company = data.get("company") if isinstance(data, dict) else None
    return company if isinstance(company, str) and company.strip() else None


async def lookup_manufacturer(
    mac: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """
    Return the vendor name for *mac*, or "Desconocido" when every source fails.

    Args:
        mac: Normalized MAC address
        transport: Optional httpx transport for tests
    """
    async with httpx.AsyncClient(timeout=5.0, transport=transport) as client:
        for source in (_from_macvendors, _from_maclookup):
            try:
                vendor = await source(client, mac)
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(
                    "MAC vendor source failed",
                    extra={"source": source.__name__, "error": str(e)},
                )
                continue
            if vendor:
                return vendor
    return UNKNOWN_VENDOR
