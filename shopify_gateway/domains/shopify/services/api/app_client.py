"""
Shopify app-level API client: script tags and recurring charges
"""

import time
from typing import Any, Dict, List, Optional

from shopify_gateway.core.exceptions import ConfigurationError
from shopify_gateway.core.logging import get_logger
from shopify_gateway.shared.helpers import encode_script_src

from .base_client import BaseShopifyAPIClient

logger = get_logger(__name__)


class AppAPIClient(BaseShopifyAPIClient):
    """Script tag installation and billing plans for the calling app"""

    @property
    def app_url(self) -> str:
        """Admin URL of this app inside the shop; requires the app API key"""
        if not self.api_key:
            raise ConfigurationError(
                "The app url needs an API key; pass api_key or set SHOPIFY_API_KEY",
                config_key="SHOPIFY_API_KEY",
            )
        return f"{self.base_url}/admin/apps/{self.api_key}"

    async def include_scripts(
        self, app_scripts: List[str], cache: bool = False, update: bool = False
    ) -> None:
        """
        Install the app's storefront scripts, or refresh the installed ones.

        With ``update`` set, scripts already installed get a cache-busting
        ``scriptTime`` parameter; otherwise missing scripts are created.
        """
        response = await self.get(self.api_path("script_tags.json"))
        store_scripts = response.get("script_tags") or []

        to_install = list(app_scripts)
        to_update = []
        for app_script in app_scripts:
            for store_script in store_scripts:
                if encode_script_src(app_script) in (store_script.get("src") or ""):
                    if app_script in to_install:
                        to_install.remove(app_script)
                    to_update.append({"id": store_script["id"], "src": app_script})

        if not update:
            for script in to_install:
                logger.info("Installing script tag", shop=self.shop, src=script)
                await self.post(
                    self.api_path("script_tags.json"),
                    {
                        "script_tag": {
                            "event": "onload",
                            "src": encode_script_src(script),
                            "cache": cache,
                        }
                    },
                )
            return

        for script in to_update:
            src = encode_script_src(script["src"])
            separator = "&" if "?" in src else "?"
            await self.put(
                self.api_path(f"script_tags/{script['id']}.json"),
                {
                    "script_tag": {
                        "id": script["id"],
                        "src": f"{src}{separator}scriptTime={int(time.time() * 1000)}",
                        "cache": cache,
                    }
                },
            )

    async def get_plans(self) -> List[Dict[str, Any]]:
        response = await self.get(self.api_path("recurring_application_charges.json"))
        return response.get("recurring_application_charges") or []

    async def create_plan(
        self, name: str, price: float, trial_days: int = 0
    ) -> Optional[Dict[str, Any]]:
        response = await self.post(
            self.api_path("recurring_application_charges.json"),
            {
                "recurring_application_charge": {
                    "name": name,
                    "price": price,
                    "return_url": self.app_url,
                    "trial_days": trial_days,
                }
            },
        )
        return response.get("recurring_application_charge")

    async def get_plan_status(self, plan_id: str) -> Optional[str]:
        charge = await self._get_plan(plan_id)
        return charge.get("status")

    async def get_plan_url(self, plan_id: str) -> Optional[str]:
        charge = await self._get_plan(plan_id)
        return charge.get("confirmation_url")

    async def _get_plan(self, plan_id: str) -> Dict[str, Any]:
        response = await self.get(
            self.api_path(f"recurring_application_charges/{plan_id}.json")
        )
        return response.get("recurring_application_charge") or {}
